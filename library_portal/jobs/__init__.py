"""
Tarefas disparadas externamente (cron, agendador do orquestrador).
"""
