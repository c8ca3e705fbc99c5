"""
Answer evaluation.

Review rubric models and the model-backed reviewer used by the answer
quality gate.
"""
