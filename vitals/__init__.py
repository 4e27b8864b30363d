"""Patient vital-sign risk assessment.

This package contains the scoring rules, the resilient retrieval pipeline and
the aggregation of evaluated patients into alert categories.
"""
