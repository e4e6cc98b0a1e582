"""Azure Functions blueprints"""

from .compatibility_bp import bp as compatibility_bp

__all__ = ["compatibility_bp"]
