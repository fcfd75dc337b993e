"""
Lifecycle URL patterns for the family note API.
"""
from django.urls import path

from .views import (
    LifecycleView, ReportDeathView, CancelDeathReportView,
    InitiateConsentView, ResetConsentView, ConsentView,
    InitiateDeletionView, CancelDeletionView, DeletionConsentView, RequeuePurgeView,
    ActionLogView
)

urlpatterns = [
    path('<int:creator_id>/', LifecycleView.as_view(), name='lifecycle'),
    path('<int:creator_id>/log/', ActionLogView.as_view(), name='lifecycle_log'),

    # Death report
    path('<int:creator_id>/report-death/', ReportDeathView.as_view(), name='report_death'),
    path('<int:creator_id>/cancel-death-report/', CancelDeathReportView.as_view(), name='cancel_death_report'),

    # Note opening consent
    path('<int:creator_id>/consent/', ConsentView.as_view(), name='consent'),
    path('<int:creator_id>/consent/initiate/', InitiateConsentView.as_view(), name='initiate_consent'),
    path('<int:creator_id>/consent/reset/', ResetConsentView.as_view(), name='reset_consent'),

    # Data deletion consent
    path('<int:creator_id>/deletion/', DeletionConsentView.as_view(), name='deletion_consent'),
    path('<int:creator_id>/deletion/initiate/', InitiateDeletionView.as_view(), name='initiate_deletion'),
    path('<int:creator_id>/deletion/cancel/', CancelDeletionView.as_view(), name='cancel_deletion'),
    path('<int:creator_id>/deletion/purge/', RequeuePurgeView.as_view(), name='requeue_purge'),
]
