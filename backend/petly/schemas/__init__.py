# Schemas package init
"""
Pydantic request/response models. JSON field names are camelCase; Python
attributes are snake_case (see schemas/common.py CamelModel).
"""
