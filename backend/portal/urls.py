from django.urls import path

from . import views

app_name = 'portal'

urlpatterns = [
    # Authentication
    path('auth/register', views.register_user, name='register'),
    path('auth/login', views.login_user, name='login'),
    path('users/me', views.current_user, name='current-user'),
    path('profile/employer', views.employer_profile, name='employer-profile'),

    # Jobs
    path('jobs', views.jobs_list_create, name='jobs-list-create'),
    path('jobs/employer', views.employer_jobs, name='employer-jobs'),
    path('jobs/<int:job_id>', views.job_detail, name='job-detail'),

    # Applications
    path('applications', views.submit_application, name='application-submit'),
    path('applications/status-config', views.application_status_config, name='application-status-config'),
    path('applications/applicant', views.applicant_applications, name='applicant-applications'),
    path('applications/employer', views.employer_applications, name='employer-applications'),
    path('applications/job/<int:job_id>', views.job_applications, name='job-applications'),
    path('applications/<int:app_id>', views.application_detail, name='application-detail'),
    path('applications/<int:app_id>/acknowledge', views.acknowledge_application, name='application-acknowledge'),
    path('applications/<int:app_id>/status', views.update_application_status, name='application-status'),
    path('applications/<int:app_id>/status-history', views.application_status_history, name='application-status-history'),

    # Files
    path('files/resume/<int:app_id>', views.download_resume, name='resume-download'),
]
