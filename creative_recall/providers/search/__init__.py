"""
Semantic-Search Endpoint Clients

Available:
    HttpSemanticSearchEndpoint: POSTs queries to the remote search function
"""

from creative_recall.providers.search.http import HttpSemanticSearchEndpoint

__all__ = ["HttpSemanticSearchEndpoint"]
