"""
API views for the job portal.
"""
import logging

import firebase_admin
from django.contrib.auth import get_user_model
from django.db import transaction
from firebase_admin import auth as firebase_auth
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from . import status_flow
from .exceptions import Forbidden, NotFound
from .firebase_utils import create_custom_token, initialize_firebase
from .models import EmployerProfile, Job, Role, UserAccount
from .permissions import (
    IsEmployer,
    IsEmployerOrAdmin,
    IsEmployerOrJobSeeker,
    IsJobSeeker,
    IsPortalUser,
)
from .policy import get_role
from .resumes import resume_response
from .serializers import (
    ApplicationSerializer,
    ApplicationSubmitSerializer,
    EmployerProfileSerializer,
    JobSerializer,
    StatusSummarySerializer,
    StatusUpdateSerializer,
    UserAccountSerializer,
    UserLoginSerializer,
    UserRegistrationSerializer,
    UserSummarySerializer,
)
from .service import get_application_service

logger = logging.getLogger(__name__)
User = get_user_model()


# ======================
# Authentication
# ======================

def _auth_payload(user, token):
    return {
        'user': UserSummarySerializer(user).data,
        'account': UserAccountSerializer(user.account).data,
        'token': token,
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def register_user(request):
    """
    Register a new user with email and password using Firebase Authentication.

    Request Body:
    {
        "email": "user@example.com",
        "password": "SecurePass123",
        "confirm_password": "SecurePass123",
        "name": "Jane Doe",
        "role": "EMPLOYER" | "JOBSEEKER"
    }

    Response:
    {
        "user": {...},
        "account": {...},
        "token": "firebase_custom_token",
        "message": "Registration successful"
    }
    """
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    if not initialize_firebase():
        return Response(
            {'error': {'code': 'service_unavailable', 'message': 'Authentication service is not available.'}},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    validated_data = serializer.validated_data
    email = validated_data['email']
    password = validated_data['password']
    name = validated_data['name'].strip()
    role = validated_data['role']

    duplicate_response = Response(
        {
            'error': {
                'code': 'duplicate_email',
                'message': 'An account with this email already exists. Please log in instead.'
            }
        },
        status=status.HTTP_409_CONFLICT
    )

    if User.objects.filter(email__iexact=email).exists() or UserAccount.objects.filter(email=email).exists():
        return duplicate_response

    try:
        firebase_user = firebase_auth.create_user(email=email, password=password, display_name=name)
        logger.info(f"Created Firebase user: {firebase_user.uid}")
    except firebase_admin.exceptions.AlreadyExistsError:
        return duplicate_response
    except Exception as e:
        logger.error(f"Firebase user creation failed: {e}")
        return Response(
            {'error': {'code': 'registration_failed', 'message': 'Registration failed. Please try again.'}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    try:
        with transaction.atomic():
            parts = name.split()
            user = User.objects.create_user(
                username=firebase_user.uid,  # Use Firebase UID as username
                email=email,
                password=password,
                first_name=parts[0] if parts else '',
                last_name=' '.join(parts[1:]),
            )
            UserAccount.objects.create(
                user=user, email=email, role=role, display_name=name, firebase_uid=firebase_user.uid,
            )
        logger.info(f"Created {role} account for: {email}")
    except Exception as e:
        # Something went wrong creating the Django user - rollback Firebase user
        try:
            firebase_auth.delete_user(firebase_user.uid)
        except Exception as cleanup_error:
            logger.warning(f"Failed to roll back Firebase user {firebase_user.uid}: {cleanup_error}")
        logger.error(f"Django user creation failed: {e}")
        return Response(
            {'error': {'code': 'registration_failed', 'message': 'Registration failed. Please try again.'}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    payload = _auth_payload(user, create_custom_token(firebase_user.uid))
    payload['message'] = 'Registration successful.'
    return Response(payload, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def login_user(request):
    """
    Look up the user by email and hand back a custom token.

    Firebase Admin cannot check passwords; the client signs in with Firebase
    and then sends the ID token as a Bearer header on later requests.
    """
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    if not initialize_firebase():
        return Response(
            {'error': {'code': 'service_unavailable', 'message': 'Authentication service is not available.'}},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    email = serializer.validated_data['email']
    invalid_response = Response(
        {'error': {'code': 'invalid_credentials', 'message': 'Invalid email or password.'}},
        status=status.HTTP_401_UNAUTHORIZED
    )

    try:
        firebase_user = firebase_auth.get_user_by_email(email)
    except firebase_auth.UserNotFoundError:
        return invalid_response
    except Exception as e:
        logger.error(f"Firebase user lookup failed: {e}")
        return Response(
            {'error': {'code': 'authentication_failed', 'message': 'Authentication failed. Please try again.'}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    user = User.objects.filter(username=firebase_user.uid).select_related('account').first()
    if user is None or not UserAccount.objects.filter(user=user).exists():
        # Known to Firebase but never registered here, so no role to act under
        logger.warning(f"Login for {email} without a portal account")
        return invalid_response

    payload = _auth_payload(user, create_custom_token(firebase_user.uid))
    payload['message'] = 'Login successful. Please authenticate with Firebase on the client.'
    return Response(payload, status=status.HTTP_200_OK)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def current_user(request):
    """Read or rename the signed-in user's account."""
    try:
        account = request.user.account
    except UserAccount.DoesNotExist:
        raise NotFound('No portal account for this user.')

    if request.method == 'GET':
        return Response(UserAccountSerializer(account).data)

    serializer = UserAccountSerializer(account, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsEmployer])
def employer_profile(request):
    """
    GET: the signed-in employer's profile, created empty on first access.
    PUT: replace the profile; fields left out are cleared.
    """
    profile, created = EmployerProfile.objects.select_related('user', 'user__account').get_or_create(
        user=request.user,
    )
    if created:
        logger.info(f"Created employer profile for user {request.user.pk}")

    if request.method == 'GET':
        return Response(EmployerProfileSerializer(profile).data)

    serializer = EmployerProfileSerializer(profile, data=request.data)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


# ======================
# Jobs
# ======================

def _require_employer(user):
    if get_role(user) != Role.EMPLOYER:
        raise Forbidden('Only employers can manage job postings.')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def jobs_list_create(request):
    """
    GET: active job postings, newest first.
    POST: create a posting owned by the requesting employer.
    """
    if request.method == 'GET':
        jobs = Job.objects.filter(active=True).select_related('employer', 'employer__account')
        return Response(JobSerializer(jobs, many=True).data)

    _require_employer(request.user)
    serializer = JobSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    job = serializer.save(employer=request.user)
    logger.info(f"Employer {request.user.pk} posted job {job.pk}")
    return Response(JobSerializer(job).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsEmployer])
def employer_jobs(request):
    jobs = Job.objects.filter(employer=request.user).select_related('employer', 'employer__account')
    return Response(JobSerializer(jobs, many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def job_detail(request, job_id):
    """
    GET: posting detail.
    PUT/PATCH: update a posting you own.
    DELETE: deactivate a posting you own; its applications are kept.
    """
    try:
        job = Job.objects.select_related('employer', 'employer__account').get(pk=job_id)
    except Job.DoesNotExist:
        raise NotFound('Job not found.')

    if request.method == 'GET':
        return Response(JobSerializer(job).data)

    if job.employer_id != request.user.pk:
        raise Forbidden('You can only modify your own job postings.')

    if request.method == 'DELETE':
        if job.active:
            job.active = False
            job.save(update_fields=['active', 'updated_at'])
            logger.info(f"Employer {request.user.pk} deactivated job {job.pk}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = JobSerializer(job, data=request.data, partial=(request.method == 'PATCH'))
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


# ======================
# Applications
# ======================

@api_view(['POST'])
@permission_classes([IsAuthenticated])
def submit_application(request):
    """
    Apply to a job.

    Multipart body: jobId, coverLetter, resume (file).
    """
    serializer = ApplicationSubmitSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    upload = data['resume']

    application = get_application_service().submit(
        job_id=data['jobId'],
        cover_letter=data.get('coverLetter', ''),
        resume_bytes=upload.read(),
        resume_name=upload.name,
        resume_mime=getattr(upload, 'content_type', '') or '',
        actor=request.user,
    )
    return Response(ApplicationSerializer(application).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsEmployer])
def acknowledge_application(request, app_id):
    application = get_application_service().acknowledge(app_id, request.user)
    return Response(ApplicationSerializer(application).data)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsEmployer])
def update_application_status(request, app_id):
    """
    Move an application to a new status.

    Body: {"status": "SHORTLISTED", "feedback": "..."}
    A stale write returns 409; re-read the application and retry.
    """
    serializer = StatusUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    application = get_application_service().transition(
        app_id,
        serializer.validated_data['status'],
        serializer.validated_data.get('feedback'),
        request.user,
    )
    return Response(ApplicationSerializer(application).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPortalUser])
def application_detail(request, app_id):
    application = get_application_service().get(app_id, request.user)
    return Response(ApplicationSerializer(application).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsEmployerOrJobSeeker])
def application_status_history(request, app_id):
    summary = get_application_service().status_summary(app_id, request.user)
    return Response(StatusSummarySerializer(summary).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def application_status_config(request):
    return Response(status_flow.status_config())


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsJobSeeker])
def applicant_applications(request):
    applications = get_application_service().list_for_applicant(request.user)
    return Response(ApplicationSerializer(applications, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsEmployer])
def job_applications(request, job_id):
    applications = get_application_service().list_for_job(job_id, request.user)
    return Response(ApplicationSerializer(applications, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsEmployer])
def employer_applications(request):
    applications = get_application_service().list_for_employer(request.user)
    return Response(ApplicationSerializer(applications, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsEmployerOrAdmin])
def download_resume(request, app_id):
    """
    Stream the resume attached to an application.

    Served inline unless the ``download`` query parameter is present.
    """
    service = get_application_service()
    application = service.open_resume(app_id, request.user)
    return resume_response(service.blobs, application, as_attachment='download' in request.query_params)
