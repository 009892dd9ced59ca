# Storefront Backend
