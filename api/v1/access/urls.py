"""
Category access URL patterns for the family note API.
"""
from django.urls import path

from .views import (
    CategoryListView, AccessMatrixView, CategoryAccessView, AccessibleCategoriesView,
    AccessPresetsView, AccessPresetDetailView, PresetRecommendationsView, ApplyPresetsView
)

urlpatterns = [
    path('categories/', CategoryListView.as_view(), name='categories'),

    # The caller's own presets
    path('presets/', AccessPresetsView.as_view(), name='access_presets'),
    path('presets/<int:pk>/', AccessPresetDetailView.as_view(), name='access_preset_detail'),

    # Per creator
    path('<int:creator_id>/matrix/', AccessMatrixView.as_view(), name='access_matrix'),
    path('<int:creator_id>/categories/', AccessibleCategoriesView.as_view(), name='accessible_categories'),
    path(
        '<int:creator_id>/members/<int:member_id>/categories/<str:category_id>/',
        CategoryAccessView.as_view(),
        name='category_access'
    ),
    path('<int:creator_id>/presets/recommendations/', PresetRecommendationsView.as_view(), name='preset_recommendations'),
    path('<int:creator_id>/presets/apply/', ApplyPresetsView.as_view(), name='apply_presets'),
]
