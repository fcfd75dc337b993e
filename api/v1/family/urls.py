"""
Family URL patterns for the family note API.
"""
from django.urls import path

from .views import (
    FamilyMembersListView, FamilyMemberDetailView,
    InvitationsView, InvitationPreviewView, AcceptInvitationView,
    ConnectionsView, LeaveFamilyView
)

urlpatterns = [
    # The caller's own family
    path('members/', FamilyMembersListView.as_view(), name='family_members'),
    path('members/<int:pk>/', FamilyMemberDetailView.as_view(), name='family_member_detail'),

    # Invitations
    path('invitations/', InvitationsView.as_view(), name='invitations'),
    path('invitations/<str:token>/', InvitationPreviewView.as_view(), name='invitation_preview'),
    path('invitations/<str:token>/accept/', AcceptInvitationView.as_view(), name='invitation_accept'),

    # Families the caller belongs to
    path('connections/', ConnectionsView.as_view(), name='connections'),
    path('<int:creator_id>/leave/', LeaveFamilyView.as_view(), name='leave_family'),
]
