"""
Exportador Airtable -> GitHub.

Job de una sola corrida (cron / systemd timer) que publica el contenido
completo de una tabla Airtable como JSON en un repositorio GitHub.
"""

__version__ = "1.0.0"
