# Services package init
"""
Chill Gamer Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and the document store.
Why:   Routes handle HTTP; services handle store access.
How:   Services receive the Database for each call and return JSON-ready
       documents or summary models.

Service Inventory:
    - ReviewService:    reviews CRUD, highest rated, search, genres
    - WatchlistService: per-user watchlist with duplicate rejection
    - GameService:      read-only game catalog
    - UserService:      profile lookup and login upsert
    - StatsService:     per-collection counts for /health
"""
