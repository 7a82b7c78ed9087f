import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='UserAccount',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('email', models.EmailField(db_index=True, max_length=254, unique=True)),
                ('role', models.CharField(choices=[('ADMIN', 'Administrator'), ('EMPLOYER', 'Employer'), ('JOBSEEKER', 'Job Seeker')], default='JOBSEEKER', max_length=16)),
                ('display_name', models.CharField(blank=True, max_length=180)),
                ('firebase_uid', models.CharField(blank=True, db_index=True, max_length=128)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='account', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [models.Index(fields=['role'], name='portal_acct_role_idx')],
            },
        ),
        migrations.CreateModel(
            name='Job',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=220)),
                ('company', models.CharField(max_length=180)),
                ('description', models.TextField(blank=True, max_length=2000)),
                ('location', models.CharField(blank=True, max_length=160)),
                ('job_type', models.CharField(choices=[('ft', 'Full-time'), ('pt', 'Part-time'), ('contract', 'Contract'), ('intern', 'Internship'), ('temp', 'Temporary')], default='ft', max_length=20)),
                ('salary', models.CharField(blank=True, max_length=120)),
                ('posted_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('deadline', models.DateTimeField(blank=True, null=True)),
                ('active', models.BooleanField(db_index=True, default=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('employer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='posted_jobs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-posted_at'],
                'indexes': [
                    models.Index(fields=['employer', '-posted_at'], name='portal_job_employer_idx'),
                    models.Index(fields=['active', 'deadline'], name='portal_job_active_dl_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Application',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('applied_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('cover_letter', models.TextField(blank=True)),
                ('resume_handle', models.CharField(editable=False, max_length=255)),
                ('resume_name', models.CharField(blank=True, editable=False, max_length=255)),
                ('resume_content_type', models.CharField(blank=True, editable=False, max_length=100)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('REVIEWING', 'Reviewing'), ('SHORTLISTED', 'Shortlisted'), ('INTERVIEWED', 'Interviewed'), ('OFFERED', 'Offered'), ('ACCEPTED', 'Accepted'), ('REJECTED', 'Rejected')], default='PENDING', max_length=16)),
                ('feedback', models.TextField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('version', models.PositiveIntegerField(default=0)),
                ('applicant', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='job_applications', to=settings.AUTH_USER_MODEL)),
                ('job', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='applications', to='portal.job')),
            ],
            options={
                'ordering': ['-applied_at', '-id'],
                'indexes': [
                    models.Index(fields=['applicant', '-applied_at'], name='portal_app_applicant_idx'),
                    models.Index(fields=['job', '-applied_at'], name='portal_app_job_idx'),
                    models.Index(fields=['status'], name='portal_app_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('job', 'applicant'), name='uniq_application_job_applicant'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ApplicationStatusChange',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('old_status', models.CharField(choices=[('PENDING', 'Pending'), ('REVIEWING', 'Reviewing'), ('SHORTLISTED', 'Shortlisted'), ('INTERVIEWED', 'Interviewed'), ('OFFERED', 'Offered'), ('ACCEPTED', 'Accepted'), ('REJECTED', 'Rejected')], max_length=16)),
                ('new_status', models.CharField(choices=[('PENDING', 'Pending'), ('REVIEWING', 'Reviewing'), ('SHORTLISTED', 'Shortlisted'), ('INTERVIEWED', 'Interviewed'), ('OFFERED', 'Offered'), ('ACCEPTED', 'Accepted'), ('REJECTED', 'Rejected')], max_length=16)),
                ('feedback', models.TextField(blank=True, null=True)),
                ('changed_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('application', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_changes', to='portal.application')),
                ('changed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='status_changes_made', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-changed_at', '-id'],
                'indexes': [models.Index(fields=['application', '-changed_at'], name='portal_chg_app_idx')],
            },
        ),
    ]
