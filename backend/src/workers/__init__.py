"""Background processes: broker event consumer and Celery maintenance tasks"""
