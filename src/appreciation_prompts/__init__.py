"""
Appreciation Prompts - anonymized prompt construction for student report-card appreciations.

Turns a student's multi-period record, teacher observations and style
settings into the prompts handed to a text-generation client.
"""

__version__ = "0.1.0"
