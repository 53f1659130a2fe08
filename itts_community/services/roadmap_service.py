from itts_community.errors import NotFound
from itts_community.extensions import db
from itts_community.models.roadmap import Roadmap, RoadmapItem
from itts_community.services.audit_service import AuditService
from itts_community.utils.pagination import list_query
from itts_community.utils.redis_lock import redis_lock

LOCK_TTL = 5


class RoadmapService:

    @staticmethod
    def get(roadmap_id):
        roadmap = db.session.get(Roadmap, roadmap_id)
        if roadmap is None:
            raise NotFound("roadmap", roadmap_id)
        return roadmap

    @staticmethod
    def list_roadmaps(params):
        return list_query(
            Roadmap.query,
            Roadmap,
            params,
            search_columns=(Roadmap.title, Roadmap.description),
            sort_fields={
                "month_number": Roadmap.month_number,
                "sort_order": Roadmap.sort_order,
                "title": Roadmap.title,
                "created_at": Roadmap.created_at,
            },
            default_sort=(Roadmap.month_number.asc(), Roadmap.sort_order.asc()),
        )

    @staticmethod
    def create(data, actor_id):
        with redis_lock("lock:roadmaps:create", LOCK_TTL):
            roadmap = Roadmap(**data)
            db.session.add(roadmap)
            db.session.flush()
            AuditService.record("roadmap.create", user_id=actor_id, resource_type="roadmap", resource_id=roadmap.id)
            db.session.commit()
        return roadmap

    @staticmethod
    def update(roadmap_id, data, actor_id):
        with redis_lock(f"lock:roadmaps:{roadmap_id}", LOCK_TTL):
            roadmap = RoadmapService.get(roadmap_id)
            for key, value in data.items():
                setattr(roadmap, key, value)
            AuditService.record("roadmap.update", user_id=actor_id, resource_type="roadmap", resource_id=roadmap.id,
                                metadata={"fields": sorted(data.keys())})
            db.session.commit()
        return roadmap

    @staticmethod
    def delete(roadmap_id, actor_id):
        with redis_lock(f"lock:roadmaps:{roadmap_id}", LOCK_TTL):
            roadmap = RoadmapService.get(roadmap_id)
            db.session.delete(roadmap)
            AuditService.record("roadmap.delete", user_id=actor_id, resource_type="roadmap", resource_id=roadmap_id)
            db.session.commit()


class RoadmapItemService:

    @staticmethod
    def get(item_id):
        item = db.session.get(RoadmapItem, item_id)
        if item is None:
            raise NotFound("roadmap_item", item_id)
        return item

    @staticmethod
    def list_items(params):
        return list_query(
            RoadmapItem.query,
            RoadmapItem,
            params,
            search_columns=(RoadmapItem.item_text,),
            sort_fields={"sort_order": RoadmapItem.sort_order, "created_at": RoadmapItem.created_at},
            default_sort=(RoadmapItem.roadmap_id.asc(), RoadmapItem.sort_order.asc()),
        )

    @staticmethod
    def create(data, actor_id):
        roadmap = RoadmapService.get(data["roadmap_id"])
        with redis_lock(f"lock:roadmaps:{roadmap.id}", LOCK_TTL):
            item = RoadmapItem(
                roadmap_id=roadmap.id,
                item_text=data["item_text"],
                sort_order=data.get("sort_order", 0),
            )
            db.session.add(item)
            db.session.flush()
            AuditService.record("roadmap_item.create", user_id=actor_id, resource_type="roadmap_item",
                                resource_id=item.id, metadata={"roadmap_id": roadmap.id})
            db.session.commit()
        return item

    @staticmethod
    def update(item_id, data, actor_id):
        with redis_lock(f"lock:roadmap_items:{item_id}", LOCK_TTL):
            item = RoadmapItemService.get(item_id)
            for key, value in data.items():
                setattr(item, key, value)
            AuditService.record("roadmap_item.update", user_id=actor_id, resource_type="roadmap_item",
                                resource_id=item.id, metadata={"fields": sorted(data.keys())})
            db.session.commit()
        return item

    @staticmethod
    def delete(item_id, actor_id):
        with redis_lock(f"lock:roadmap_items:{item_id}", LOCK_TTL):
            item = RoadmapItemService.get(item_id)
            db.session.delete(item)
            AuditService.record("roadmap_item.delete", user_id=actor_id, resource_type="roadmap_item",
                                resource_id=item_id)
            db.session.commit()
