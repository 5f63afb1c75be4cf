"""Sentiment analysis for chat messages."""

from wellness.services.sentiment.sentiment_analyzer import SentimentAnalyzer

__all__ = ["SentimentAnalyzer"]
