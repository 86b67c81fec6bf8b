from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from django.contrib.auth import get_user_model
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework_simplejwt.tokens import RefreshToken
from .serializers import UserSerializer, ProfileSerializer
from .permissions import IsAdminRole
from audit.utils import log_action

User = get_user_model()


class CustomLoginView(APIView):
    """Custom login that accepts email or username."""
    permission_classes = []

    def post(self, request):
        identifier = request.data.get('username') or request.data.get('email')
        password = request.data.get('password')

        if not identifier or not password:
            return Response(
                {'detail': 'Username/email and password are required.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            if '@' in identifier:
                user = User.objects.get(email=identifier)
            else:
                user = User.objects.get(username=identifier)
        except (User.DoesNotExist, User.MultipleObjectsReturned):
            return Response(
                {'detail': 'Invalid credentials.'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        user = authenticate(username=user.username, password=password)
        if user is None or not user.is_active:
            return Response(
                {'detail': 'Invalid credentials.'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        refresh = RefreshToken.for_user(user)

        return Response({
            'access': str(refresh.access_token),
            'refresh': str(refresh),
            'user': UserSerializer(user).data,
        })


class ChangePasswordView(APIView):
    """Change user password."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        current_password = request.data.get('current_password')
        new_password = request.data.get('new_password')

        if not current_password or not new_password:
            return Response(
                {'detail': 'Current password and new password are required.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        user = request.user

        if not user.check_password(current_password):
            return Response(
                {'detail': 'Current password is incorrect.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            validate_password(new_password, user)
        except ValidationError as e:
            return Response({'detail': list(e.messages)}, status=status.HTTP_400_BAD_REQUEST)

        user.set_password(new_password)
        user.save()

        return Response({'detail': 'Password changed successfully.'})


class UserProfileView(generics.RetrieveUpdateAPIView):
    """Get and update current user profile."""
    serializer_class = ProfileSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user


class UserListView(generics.ListCreateAPIView):
    """List and create users. Admin only."""
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        queryset = User.objects.all()

        search = self.request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(email__icontains=search) |
                Q(first_name__icontains=search) |
                Q(last_name__icontains=search) |
                Q(username__icontains=search) |
                Q(employee_number__icontains=search)
            )

        employee_type = self.request.query_params.get('employee_type', None)
        if employee_type:
            queryset = queryset.filter(employee_type=employee_type)

        role = self.request.query_params.get('role', None)
        if role:
            queryset = queryset.filter(role=role)

        user_status = self.request.query_params.get('status', None)
        if user_status == 'ACTIVE':
            queryset = queryset.filter(is_active=True, status='ACTIVE')
        elif user_status == 'INACTIVE':
            queryset = queryset.filter(Q(is_active=False) | Q(status='INACTIVE'))

        return queryset.order_by('-created_at')


class UserDetailView(generics.RetrieveUpdateAPIView):
    """Get or update a user by ID. Admin only."""
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    queryset = User.objects.all()


class UserActivateDeactivateView(APIView):
    """Activate or deactivate a user."""
    permission_classes = [IsAuthenticated, IsAdminRole]

    def post(self, request, user_id):
        target_user = get_object_or_404(User, id=user_id)

        action = request.data.get('action')  # 'activate' or 'deactivate'
        old_status = target_user.status

        if action == 'deactivate':
            if target_user.id == request.user.id:
                return Response(
                    {'detail': 'You cannot deactivate your own account.'},
                    status=status.HTTP_400_BAD_REQUEST
                )
            target_user.is_active = False
            target_user.status = 'INACTIVE'
            message = f'User {target_user.get_full_name() or target_user.username} has been deactivated.'
        elif action == 'activate':
            target_user.is_active = True
            target_user.status = 'ACTIVE'
            message = f'User {target_user.get_full_name() or target_user.username} has been activated.'
        else:
            return Response(
                {'detail': 'Invalid action. Use "activate" or "deactivate".'},
                status=status.HTTP_400_BAD_REQUEST
            )

        with transaction.atomic():
            target_user.save()
            log_action(
                user=request.user,
                action=action.upper(),
                obj=target_user,
                field_name='status',
                old_value=old_status,
                new_value=target_user.status,
                detail=f'User {action}d by {request.user.get_full_name() or request.user.username}',
            )

        return Response({
            'detail': message,
            'user': UserSerializer(target_user).data
        })
