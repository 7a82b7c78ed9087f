# backend/portal/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone
import uuid


class Role(models.TextChoices):
    ADMIN = 'ADMIN', 'Administrator'
    EMPLOYER = 'EMPLOYER', 'Employer'
    JOBSEEKER = 'JOBSEEKER', 'Job Seeker'


class ApplicationStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    REVIEWING = 'REVIEWING', 'Reviewing'
    SHORTLISTED = 'SHORTLISTED', 'Shortlisted'
    INTERVIEWED = 'INTERVIEWED', 'Interviewed'
    OFFERED = 'OFFERED', 'Offered'
    ACCEPTED = 'ACCEPTED', 'Accepted'
    REJECTED = 'REJECTED', 'Rejected'


class UserAccount(models.Model):
    """Portal-level user record carrying the role and display name.

    Complements Django's auth_user table:
    - UUID primary key
    - lowercased, unique email with a DB constraint
    - the role that drives every authorization decision
    The one-to-one link to the Django User keeps request.user usable everywhere.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='account')
    email = models.EmailField(unique=True, db_index=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.JOBSEEKER)
    display_name = models.CharField(max_length=180, blank=True)
    firebase_uid = models.CharField(max_length=128, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=["role"], name="portal_acct_role_idx")]

    def save(self, *args, **kwargs):
        # Ensure lowercase email for consistency
        if self.email:
            self.email = self.email.lower()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.email} ({self.role})"

    @property
    def name(self):
        return self.display_name or self.user.get_full_name() or self.email


class EmployerProfile(models.Model):
    """Contact and company details an employer shows to applicants."""
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="employer_profile")
    phone = models.CharField(max_length=30, blank=True)
    location = models.CharField(max_length=160, blank=True)
    bio = models.TextField(max_length=1000, blank=True)
    experience = models.TextField(max_length=2000, blank=True)
    company_size = models.CharField(max_length=60, blank=True)
    industry = models.CharField(max_length=120, blank=True)
    website = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Employer profile of {self.user_id}"


class Job(models.Model):
    """A posting owned by an employer.

    The set of applications to a job is a query (``Application.objects.filter(job=...)``),
    not something the lifecycle engine walks from here.
    """
    JOB_TYPES = [
        ("ft", "Full-time"),
        ("pt", "Part-time"),
        ("contract", "Contract"),
        ("intern", "Internship"),
        ("temp", "Temporary"),
    ]

    employer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="posted_jobs")
    title = models.CharField(max_length=220)
    company = models.CharField(max_length=180)
    description = models.TextField(blank=True, max_length=2000)
    location = models.CharField(max_length=160, blank=True)
    job_type = models.CharField(max_length=20, choices=JOB_TYPES, default="ft")
    salary = models.CharField(max_length=120, blank=True)
    posted_at = models.DateTimeField(default=timezone.now)
    deadline = models.DateTimeField(null=True, blank=True)
    active = models.BooleanField(default=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-posted_at']
        indexes = [
            models.Index(fields=["employer", "-posted_at"], name="portal_job_employer_idx"),
            models.Index(fields=["active", "deadline"], name="portal_job_active_dl_idx"),
        ]

    def __str__(self):
        return f"{self.title} @ {self.company}"

    def is_open(self, now=None):
        """True while the posting is active and its deadline (if any) has not passed."""
        now = now or timezone.now()
        if not self.active:
            return False
        return self.deadline is None or self.deadline > now


class Application(models.Model):
    """One applicant's submission to one job.

    ``status`` and ``feedback`` only change through
    ``ApplicationStore.compare_and_set_status``; the remaining columns are
    fixed at creation.
    """
    IMMUTABLE_FIELDS = frozenset({
        'job', 'applicant', 'applied_at', 'resume_handle', 'resume_name',
        'resume_content_type', 'cover_letter',
    })
    STATUS_FIELDS = frozenset({'status', 'feedback', 'updated_at', 'version'})

    job = models.ForeignKey(Job, on_delete=models.PROTECT, related_name="applications")
    applicant = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="job_applications")
    applied_at = models.DateTimeField(default=timezone.now, editable=False)
    cover_letter = models.TextField(blank=True)
    resume_handle = models.CharField(max_length=255, editable=False)
    resume_name = models.CharField(max_length=255, blank=True, editable=False)
    resume_content_type = models.CharField(max_length=100, blank=True, editable=False)
    status = models.CharField(max_length=16, choices=ApplicationStatus.choices, default=ApplicationStatus.PENDING)
    feedback = models.TextField(null=True, blank=True)
    # Time of the last status write; equals applied_at until the first transition
    updated_at = models.DateTimeField(default=timezone.now)
    version = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['-applied_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=["job", "applicant"], name="uniq_application_job_applicant"),
        ]
        indexes = [
            models.Index(fields=["applicant", "-applied_at"], name="portal_app_applicant_idx"),
            models.Index(fields=["job", "-applied_at"], name="portal_app_job_idx"),
            models.Index(fields=["status"], name="portal_app_status_idx"),
        ]

    def __str__(self):
        return f"Application {self.pk}: {self.applicant_id} -> job {self.job_id} [{self.status}]"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            update_fields = kwargs.get('update_fields')
            touched = set(update_fields) if update_fields is not None else None
            if touched is None or touched & (self.IMMUTABLE_FIELDS | self.STATUS_FIELDS):
                raise ValueError(
                    "Application rows are write-once; status changes go through "
                    "ApplicationStore.compare_and_set_status"
                )
        return super().save(*args, **kwargs)


class ApplicationStatusChange(models.Model):
    """Audit trail: one row per successful status write."""
    application = models.ForeignKey(Application, on_delete=models.CASCADE, related_name="status_changes")
    old_status = models.CharField(max_length=16, choices=ApplicationStatus.choices)
    new_status = models.CharField(max_length=16, choices=ApplicationStatus.choices)
    feedback = models.TextField(null=True, blank=True)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="status_changes_made"
    )
    changed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-changed_at', '-id']
        indexes = [
            models.Index(fields=["application", "-changed_at"], name="portal_chg_app_idx"),
        ]

    def __str__(self):
        return f"{self.application_id}: {self.old_status} -> {self.new_status} @ {self.changed_at}"
