"""
Backend AltScore: alternative-data credit scoring with explanations.

Scores applicants who lack credit-bureau history from sixteen non-traditional
signals (utility and phone payments, e-commerce behavior, residential stability,
digital footprint). Modular architecture: scoring engine, analytics
(explainability and bias analysis), and a thin API server over both.
"""

__version__ = "2.1.0"
