"""
Store access for every entity.

Functions here are the only place that talks to the SQLAlchemy session.
They return ORM instances and raise DomainError with NOT_FOUND, CONFLICT
or INTERNAL; services never see SQLAlchemy exceptions.
"""
