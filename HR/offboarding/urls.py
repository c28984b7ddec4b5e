"""
URL configuration for the offboarding module.
"""
from django.urls import path

from . import views

app_name = 'offboarding'

urlpatterns = [
    # Runs
    path('runs/', views.run_list, name='run_list'),
    path('runs/<int:pk>/', views.run_detail, name='run_detail'),
    path('runs/<int:pk>/pause/', views.run_pause, name='run_pause'),
    path('runs/<int:pk>/start/', views.run_start, name='run_start'),
    path('runs/<int:pk>/cancel/', views.run_cancel, name='run_cancel'),
    path('runs/<int:pk>/force-complete/', views.run_force_complete, name='run_force_complete'),
    path('runs/<int:pk>/exit-interview/', views.run_exit_interview, name='run_exit_interview'),
    path('runs/<int:pk>/progress/', views.run_progress, name='run_progress'),
    path('runs/<int:pk>/tasks-by-role/', views.run_tasks_by_role, name='run_tasks_by_role'),
    path('runs/<int:pk>/tasks/', views.run_add_task, name='run_add_task'),

    # Tasks
    path('tasks/<int:pk>/', views.task_detail, name='task_detail'),
    path('tasks/<int:pk>/complete/', views.task_complete, name='task_complete'),
    path('tasks/<int:pk>/start/', views.task_start, name='task_start'),
    path('tasks/<int:pk>/block/', views.task_block, name='task_block'),
    path('tasks/<int:pk>/unblock/', views.task_unblock, name='task_unblock'),

    # Templates
    path('templates/resolve/', views.template_resolve, name='template_resolve'),

    # Dashboard
    path('stats/', views.offboarding_stats, name='offboarding_stats'),
]
