"""
Library Portal API: acervo, membros, empréstimos, solicitações e notificações.
"""
