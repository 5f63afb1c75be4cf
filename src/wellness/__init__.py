"""
Wellness - AI Companion Backend for Youth Mental Wellness

This package provides the backend services for the wellness companion:
account management, an AI chat relay with canned fallbacks, keyword
crisis detection, sentiment labelling and self-report assessments.

IMPORTANT: Chat content is sensitive personal data. Crisis detection
results must always reach the client together with emergency resources.
"""

__version__ = "0.1.0"
__author__ = "Wellness Engineering Team"
