"""
Decision reporting.

Sinks receive DecisionRecord objects from the driver; rendering them as
text or JSON lines is the sink's job, not the evaluator's.
"""
