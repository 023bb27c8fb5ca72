# config/urls.py

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API do Kanban
    path('board/', include('apps.board.urls')),
]

# Customizar títulos do admin
admin.site.site_header = 'Ticket Board Admin'
admin.site.site_title = 'Ticket Board'
admin.site.index_title = 'Administração do Sistema'
