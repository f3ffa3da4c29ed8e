import logging

from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from .models import User
from .permissions import IsApprover, IsPrivileged
from .serializers import RegistrationSerializer, UserSerializer

logger = logging.getLogger(__name__)


class RegistrationView(generics.CreateAPIView):
    """Students and faculty sign up here and wait for admin/HOD approval."""
    serializer_class = RegistrationSerializer
    permission_classes = [permissions.AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered %s account %s, awaiting approval", user.role, user.email)

        return Response({
            "message": "Registration successful! Please wait for admin approval.",
            "user": UserSerializer(user).data
        }, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        email = (request.data.get('email') or '').strip().lower()
        password = request.data.get('password')

        if not email or not password:
            return Response(
                {"error": "Email and password are required"},
                status=status.HTTP_400_BAD_REQUEST
            )

        user = User.objects.filter(email__iexact=email).first()
        if user is None or not user.check_password(password):
            return Response(
                {"error": "Invalid credentials"},
                status=status.HTTP_401_UNAUTHORIZED
            )

        if not user.is_active:
            return Response(
                {"error": "Your account has been deactivated"},
                status=status.HTTP_403_FORBIDDEN
            )

        if not user.is_approved:
            return Response(
                {"error": "Your account is pending approval"},
                status=status.HTTP_403_FORBIDDEN
            )

        refresh = RefreshToken.for_user(user)
        logger.info("User %s logged in", user.email)

        return Response({
            "message": "Login successful",
            "refresh": str(refresh),
            "access": str(refresh.access_token),
            "user": UserSerializer(user).data
        }, status=status.HTTP_200_OK)


class MeView(generics.RetrieveAPIView):
    serializer_class = UserSerializer

    def get_object(self):
        return self.request.user


class UserListView(generics.ListAPIView):
    """Approved user directory, used when managing group membership."""
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated, IsPrivileged]

    def get_queryset(self):
        queryset = User.objects.filter(is_approved=True)
        role = self.request.query_params.get('role')
        if role:
            queryset = queryset.filter(role=role)
        return queryset


class PendingUsersView(generics.ListAPIView):
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated, IsApprover]

    def get_queryset(self):
        return User.objects.filter(is_approved=False).order_by('-created_at')


class ApproveUserView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsApprover]

    def post(self, request, user_id):
        try:
            user = User.objects.get(id=user_id)
        except User.DoesNotExist:
            return Response(
                {"error": "User not found"},
                status=status.HTTP_404_NOT_FOUND
            )

        user.is_approved = True
        user.save(update_fields=['is_approved', 'updated_at'])
        logger.info("%s approved account %s", request.user.email, user.email)

        return Response({
            "message": f"{user.name} approved successfully",
            "user": UserSerializer(user).data
        }, status=status.HTTP_200_OK)


class RejectUserView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsApprover]

    def delete(self, request, user_id):
        try:
            user = User.objects.get(id=user_id, is_approved=False)
        except User.DoesNotExist:
            return Response(
                {"error": "Pending user not found"},
                status=status.HTTP_404_NOT_FOUND
            )

        email = user.email
        user.delete()
        logger.info("%s rejected pending account %s", request.user.email, email)
        return Response({"message": "User rejected"}, status=status.HTTP_200_OK)
