"""
Permission request intake.

Requests arrive either from a YAML file (file_loader) or from an operator
prompt (prompt). Both produce PermissionRequest models, which builder turns
into linked PermissionRuleSet objects.
"""
