#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Ticket Board - Kanban com posicionamento denso de tickets
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Configuração padrão para desenvolvimento
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import call_command, execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Comandos customizados
    if len(sys.argv) > 1:
        command = sys.argv[1]

        # Comando de setup inicial
        if command == 'setup':
            import django
            django.setup()

            print("🚀 Configurando Ticket Board...")

            print("📊 Aplicando migrações...")
            call_command('migrate', interactive=False)

            print("🌱 Populando banco com dados demo...")
            call_command('seed')

            print("🔍 Verificando posições...")
            call_command('check_positions')

            print("✅ Setup concluído!")
            return

        # Comando de backup
        elif command == 'backup':
            import django
            from datetime import datetime
            django.setup()

            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            backup_file = f"backup_ticketboard_{timestamp}.json"
            print("💾 Criando backup do banco...")
            with open(backup_file, 'w') as output:
                call_command('dumpdata', 'core', indent=2, stdout=output)
            print(f"✅ Backup criado: {backup_file}")
            return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
