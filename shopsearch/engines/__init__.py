"""
Shopsearch Engines Package

- recommendation: query understanding, retrieval, ranking and personalization
"""
