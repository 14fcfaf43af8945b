"""
URL configuration for django-quillpress.

Include in your project urls.py:

    path('', include('quillpress.urls')),

The namespaced view names (quillpress:home, ...) double as the route
identifiers of the PUBLIC_ROUTES setting.
"""
from django.urls import path

from . import views

app_name = "quillpress"

urlpatterns = [
    # Landing page
    path("", views.HomeView.as_view(), name="home"),

    # Sessions
    path("login", views.LoginView.as_view(), name="login"),
    path("sessions", views.SessionCreateView.as_view(), name="session_create"),
    path("logout", views.LogoutView.as_view(), name="logout"),

    # Owner dashboard and post CRUD
    path("admin", views.PostListView.as_view(), name="admin"),
    path("posts", views.PostListView.as_view(), name="post_list"),
    path("posts/new", views.PostNewView.as_view(), name="post_new"),
    path("posts/<slug:slug>", views.PostDetailView.as_view(), name="post_detail"),
    path("posts/<slug:slug>/edit", views.PostEditView.as_view(), name="post_edit"),
    path("posts/<slug:slug>/restore", views.PostRestoreView.as_view(), name="post_restore"),

    # Categories
    path("categories", views.CategoryListView.as_view(), name="category_list"),
    path("categories/<int:pk>", views.CategoryDetailView.as_view(), name="category_detail"),
]
