"""Member directory endpoints guarded by the role permission matrix."""

from rest_framework import mixins
from rest_framework.decorators import action

from access_control.catalog import DELETE_MEMBER, EDIT_MEMBER, VIEW_MEMBERS
from access_control.permissions import IsRoot, RolePermissionRequired
from access_control.services import get_actor
from core.response import BaseViewSet, api_response

from .models import Member
from .serializers import MemberSerializer, RoleChangeSerializer
from .services import change_member_role, delete_member, update_member


class MemberViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    BaseViewSet,
):
    serializer_class = MemberSerializer
    permission_classes = [RolePermissionRequired]
    queryset = Member.objects.all()
    action_permissions = {
        "list": VIEW_MEMBERS,
        "retrieve": VIEW_MEMBERS,
        "update": EDIT_MEMBER,
        "partial_update": EDIT_MEMBER,
        "destroy": DELETE_MEMBER,
    }

    def perform_update(self, serializer):
        update_member(get_actor(self.request), serializer.instance, serializer.validated_data, request=self.request)

    def perform_destroy(self, instance):
        delete_member(get_actor(self.request), instance, request=self.request)

    @action(detail=True, methods=["post"], url_path="role", permission_classes=[IsRoot])
    def role(self, request, pk=None):
        """Grant or revoke admin on a member. Root only; never self or root."""
        target = self.get_object()
        serializer = RoleChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        member = change_member_role(
            get_actor(request), target, is_admin=serializer.validated_data["is_admin"], request=request
        )
        return api_response(MemberSerializer(member).data)


__all__ = ["MemberViewSet"]
