"""Adapters de infraestrutura (HTTP, stores, transporte, notificações)."""
