from .pool_lookup import PoolInfo, get_pool_info

__all__ = ["PoolInfo", "get_pool_info"]
