import logging

from django.contrib.auth import get_user_model, authenticate
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.tokens import RefreshToken

from .models import Category

User = get_user_model()
logger = logging.getLogger(__name__)


def user_payload(user):
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'skills': user.skills,
        'city': user.city,
        'organization': user.organization_id,
        'categories': list(user.categories.values_list('id', flat=True)),
        'completed_swaps_count': user.completed_swaps_count,
        'positive_reviews_count': user.positive_reviews_count,
        'is_superuser': user.is_superuser,
        'is_staff': user.is_staff,
    }


# --- REGISTER ---
class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        username = request.data.get('username')
        email = request.data.get('email', '')
        password = request.data.get('password')

        # Basit doğrulama
        if not username or not password or not email:
            return Response({'error': 'Username, email and password are required'}, status=status.HTTP_400_BAD_REQUEST)

        if User.objects.filter(username=username).exists():
            return Response({'error': 'Username already exists'}, status=status.HTTP_400_BAD_REQUEST)

        if User.objects.filter(email=email).exists():
            return Response({'error': 'Email already registered'}, status=status.HTTP_400_BAD_REQUEST)

        skills = request.data.get('skills') or []
        if not isinstance(skills, list) or not all(isinstance(s, str) for s in skills):
            return Response({'error': 'Skills must be a list of strings'}, status=status.HTTP_400_BAD_REQUEST)

        category_ids = request.data.get('categories') or []
        if not isinstance(category_ids, list) or not all(isinstance(c, int) for c in category_ids):
            return Response({'error': 'Categories must be a list of ids'}, status=status.HTTP_400_BAD_REQUEST)
        categories = Category.objects.filter(id__in=category_ids)
        if categories.count() != len(set(category_ids)):
            return Response({'error': 'Unknown category'}, status=status.HTTP_400_BAD_REQUEST)

        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            skills=skills,
            city=request.data.get('city', ''),
        )
        user.categories.set(categories)
        logger.info("User %s registered", user.pk)

        refresh = RefreshToken.for_user(user)
        return Response({
            'message': 'User created successfully',
            'refresh': str(refresh),
            'access': str(refresh.access_token)
        }, status=status.HTTP_201_CREATED)


# --- LOGIN ---
class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        username = request.data.get('username')
        password = request.data.get('password')

        user = authenticate(username=username, password=password)
        if user is None:
            return Response({'error': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)

        refresh = RefreshToken.for_user(user)
        return Response({
            'message': 'Login successful',
            'refresh': str(refresh),
            'access': str(refresh.access_token)
        }, status=status.HTTP_200_OK)


# --- USER DETAIL ---
class UserDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(user_payload(request.user), status=status.HTTP_200_OK)
