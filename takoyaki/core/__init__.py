# takoyaki/core/__init__.py
