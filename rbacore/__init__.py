"""Role managers, policy models and matching functions for access control."""

__version__ = "0.1.0"

__all__ = [
    "assertion",
    "default_model",
    "function_map",
    "policy_store",
    "role_manager",
    "util",
]