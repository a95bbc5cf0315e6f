"""Product photo agents: AI copywriter and studio photographer"""

__version__ = "0.1.0"
