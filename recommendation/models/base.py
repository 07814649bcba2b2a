# Decision log tables share the application's declarative Base so
# main.py's create_all() picks them up
from db import Base

__all__ = ["Base"]
