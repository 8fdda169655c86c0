"""API: camada de borda HTTP do gateway.

Subpastas:
- middleware/: correlation id e rate limit
- routes/: endpoints HTTP (health, /api/*)

NÃO PODE conter: FSM, regras de sessão ou IO com o transporte.
"""
