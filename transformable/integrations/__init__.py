"""Integrations with persistence frameworks.

Import the integration module directly, e.g.:

    from transformable.integrations.sqlalchemy import SQLAlchemyTransformable
"""
