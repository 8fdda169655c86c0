"""App: supervisor da conexão, serviços e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- supervisor/: dono do cliente de transporte e do SessionState
- services/: serviços de aplicação (auto-reply, envio em lote)
- infra/: implementações concretas de IO (stores, transporte, notificações)
- protocols/: contratos/interfaces
- observability/: correlation id e métricas em logs

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
