from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin Paneli
    path('admin/', admin.site.urls),

    # Swap API'leri (ilanlar, etkileşimler, ilerleme, bildirimler)
    path('api/', include('swaps.api_urls')),

    # Accounts API'leri (Login, Register)
    path('api/', include('accounts.urls')),
]
