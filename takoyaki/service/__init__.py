# takoyaki/service/__init__.py

from .subql import SubqlApiService, apply_filters_to_request, build_filter_request, build_full_block_request
