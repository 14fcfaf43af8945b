"""
Views for django-quillpress.

Every view reads the acting account from ``request.quill``, which the
AccessGateMiddleware binds before the view runs.
"""
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.shortcuts import redirect
from django.template.response import TemplateResponse
from django.views import View
from django.views.generic import ListView, TemplateView

from . import counters, identity, publication, sessions, store
from .conf import quill_settings
from .forms import CategoryForm, LoginForm, PostForm
from .middleware import effective_method, form_data

UNPROCESSABLE = 422


class QuillViewMixin:
    """
    Resolve ``_method`` overrides and expose the submitted form data.

    The override is applied after CSRF validation has seen the original POST.
    """

    def dispatch(self, request, *args, **kwargs):
        self.data = form_data(request)
        request.method = effective_method(request)
        return super().dispatch(request, *args, **kwargs)

    @property
    def account(self):
        return self.request.quill.account


class HomeView(QuillViewMixin, ListView):
    """Latest published posts. Does not count views."""

    template_name = "quillpress/home.html"
    context_object_name = "posts"

    def get_queryset(self):
        return store.list_published()


# Sessions


class LoginView(QuillViewMixin, TemplateView):
    """Render the login form."""

    template_name = "quillpress/login.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.setdefault("form", LoginForm())
        return context


class SessionCreateView(QuillViewMixin, TemplateView):
    """Check credentials and start a fresh session."""

    template_name = "quillpress/login.html"
    http_method_names = ["post"]

    def post(self, request, *args, **kwargs):
        form = LoginForm(self.data)
        form.is_valid()
        account = identity.authenticate(
            form.cleaned_data.get("email"),
            form.cleaned_data.get("password"),
        )
        if account is None:
            return self.render_to_response(
                {"form": form, "login_error": "Invalid email or password"},
                status=UNPROCESSABLE,
            )

        sessions.login(request.session, account)
        messages.success(request, "Logged in successfully")
        return redirect(quill_settings.LOGIN_REDIRECT_URL)


class LogoutView(QuillViewMixin, View):
    """Throw the whole session away."""

    http_method_names = ["delete", "post"]

    def delete(self, request, *args, **kwargs):
        sessions.logout(request.session)
        messages.info(request, "Logged out")
        return redirect(quill_settings.LOGOUT_REDIRECT_URL)

    def post(self, request, *args, **kwargs):
        return self.delete(request, *args, **kwargs)


# Posts


class PostFormMixin(QuillViewMixin):
    form_template_name = "quillpress/post_form.html"

    def render_form(self, form, status=200, post=None):
        return TemplateResponse(
            self.request,
            self.form_template_name,
            {"form": form, "post": post},
            status=status,
        )

    def redirect_to_saved(self, post):
        """Published posts go to their public page, drafts back to the editor."""
        if post.is_published:
            return redirect(post)
        return redirect("quillpress:post_edit", slug=post.slug)


class PostListView(PostFormMixin, ListView):
    """
    The owner's dashboard: their posts, discarded ones included.

    POST creates a new post.
    """

    template_name = "quillpress/post_list.html"
    context_object_name = "posts"

    def get_queryset(self):
        return store.list_owned(self.account, include_discarded=True)

    def post(self, request, *args, **kwargs):
        form = PostForm(self.data)
        if form.is_valid():
            try:
                post = store.create_post(self.account, form.to_fields())
            except ValidationError as exc:
                form.add_store_errors(exc)
            else:
                messages.success(request, "Post created successfully")
                return self.redirect_to_saved(post)

        return self.render_form(form, status=UNPROCESSABLE)


class PostNewView(PostFormMixin, TemplateView):
    def get(self, request, *args, **kwargs):
        return self.render_form(PostForm())


class PostDetailView(PostFormMixin, TemplateView):
    """
    GET shows a published post to anyone and counts the view. HEAD answers
    the same way without counting.

    PATCH and DELETE act on the requesting owner's post only; anyone else's
    slug is a 404.
    """

    template_name = "quillpress/post_detail.html"

    def get(self, request, slug):
        post = store.find_published_by_slug(slug)
        if request.method != "HEAD":
            counters.increment(post.pk)
            post.refresh_from_db(fields=["views_count"])
        return self.render_to_response({"post": post})

    def patch(self, request, slug):
        post = store.find_owned_by_slug(self.account, slug)
        form = PostForm(self.data, instance=post)
        if form.is_valid():
            try:
                store.update_post(post, form.to_fields(partial=True))
            except ValidationError as exc:
                form.add_store_errors(exc)
            else:
                messages.success(request, "Post updated successfully")
                return self.redirect_to_saved(post)

        return self.render_form(form, status=UNPROCESSABLE, post=post)

    def put(self, request, slug):
        return self.patch(request, slug)

    def delete(self, request, slug):
        publication.discard(self.account, slug)
        messages.success(request, "Post deleted")
        return redirect("quillpress:post_list")


class PostEditView(PostFormMixin, TemplateView):
    def get(self, request, slug):
        post = store.find_owned_by_slug(self.account, slug)
        return self.render_form(PostForm(instance=post), post=post)


class PostRestoreView(QuillViewMixin, View):
    http_method_names = ["patch"]

    def patch(self, request, slug):
        try:
            publication.restore(self.account, slug)
        except ValidationError:
            messages.error(
                request,
                "Post could not be restored: another post now uses its title.",
            )
        else:
            messages.success(request, "Post restored")
        return redirect("quillpress:post_list")


# Categories


class CategoryListView(QuillViewMixin, ListView):
    """List all categories; POST creates one."""

    template_name = "quillpress/category_list.html"
    context_object_name = "categories"

    def get_queryset(self):
        return store.list_categories()

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.setdefault("form", CategoryForm())
        return context

    def post(self, request, *args, **kwargs):
        form = CategoryForm(self.data)
        if form.is_valid():
            try:
                store.create_category(form.cleaned_data["name"])
            except ValidationError as exc:
                form.add_store_errors(exc)
            else:
                messages.success(request, "Category created")
                return redirect("quillpress:category_list")

        self.object_list = self.get_queryset()
        context = self.get_context_data(form=form)
        return self.render_to_response(context, status=UNPROCESSABLE)


class CategoryDetailView(QuillViewMixin, View):
    http_method_names = ["delete"]

    def delete(self, request, pk):
        store.delete_category(store.find_category(pk))
        messages.success(request, "Category deleted")
        return redirect("quillpress:category_list")
