"""Authentication starter backend.

Delegates identity logic to a pluggable authentication engine and adds a
uniform response envelope plus transactional email notifications on top.
"""

__version__ = "0.1.0"
