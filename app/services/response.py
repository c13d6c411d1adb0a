def list_response(items: list, limit: int, offset: int) -> dict:
    return {"items": items, "count": len(items), "limit": limit, "offset": offset}


class ListResponseMixin:
    def list_response(self, db, *args, limit: int, offset: int, **kwargs):
        items = self.list(db, *args, limit=limit, offset=offset, **kwargs)
        return list_response(items, limit, offset)
