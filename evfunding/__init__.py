"""
Backend package for the EV charging funding evaluator.

Contains the FastAPI application plus the supporting pipeline for web
search, page scraping, prompt assembly, and LLM evaluation.
"""
