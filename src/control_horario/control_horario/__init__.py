"""Control Horario package.

Feature modules (users, sessions, reports) each carry a model, a repository
interface with its MySQL implementation, a service and a thin Flask controller.
"""
