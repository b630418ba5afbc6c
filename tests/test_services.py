"""
Tests for the service layer.
Covers the multi-document workflows: reference resolution before uploads,
back-reference maintenance, blob release and rollback compensation.
"""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from bayhomes.models.property import PropertyStatus
from bayhomes.repositories.area import AreaRepository
from bayhomes.repositories.property import PropertyRepository
from bayhomes.schemas.area import AreaUpdate
from bayhomes.schemas.developer import DeveloperUpdate
from bayhomes.schemas.project import ProjectCreate, ProjectUpdate
from bayhomes.schemas.property import PropertyCreate, PropertyStatusUpdate, PropertyUpdate
from bayhomes.schemas.user import UserCreate
from bayhomes.utils.exceptions import (
    BlobStoreError,
    DuplicateResourceError,
    NotFoundError,
    RelatedEntityNotFoundError
)
from tests.conftest import (
    AreaFactory,
    DeveloperFactory,
    ProjectFactory,
    PropertyFactory,
    public_id,
    raw_image
)


class TestUserService:
    """Get-or-create at sign-in."""

    @pytest.mark.asyncio
    async def test_get_or_create_user(self, user_service):
        user, created = await user_service.get_or_create_user(UserCreate(email="New.Agent@BayHomes.ae", name="New"))
        again, created_again = await user_service.get_or_create_user(UserCreate(email="new.agent@bayhomes.ae"))

        assert created is True
        assert created_again is False
        assert again.id == user.id
        assert user.email == "new.agent@bayhomes.ae"
        assert user.property_ids == []

    @pytest.mark.asyncio
    async def test_get_user_not_found(self, user_service):
        with pytest.raises(NotFoundError):
            await user_service.get_user(uuid.uuid4())


class TestAreaService:
    """Area workflows."""

    @pytest.mark.asyncio
    async def test_create_area_links_creator(self, area_service, blob_store, test_user):
        area = await AreaFactory.create_area(area_service, test_user.email, area_name="Marina", image=raw_image("m"))

        assert area.image.startswith(blob_store.base_url)
        assert blob_store.uploads == [raw_image("m")]
        assert test_user.area_ids == [str(area.id)]
        assert area.property_ids == []
        assert area.project_ids == []

    @pytest.mark.asyncio
    async def test_create_area_unknown_user_uploads_nothing(self, area_service, blob_store):
        with pytest.raises(RelatedEntityNotFoundError):
            await AreaFactory.create_area(area_service, "ghost@bayhomes.ae", image=raw_image("m"))

        assert blob_store.uploads == []

    @pytest.mark.asyncio
    async def test_duplicate_area_name(self, area_service, blob_store, test_user, test_area):
        with pytest.raises(DuplicateResourceError) as exc_info:
            await AreaFactory.create_area(area_service, test_user.email, area_name="Downtown", image=raw_image("d"))

        assert exc_info.value.status_code == 409
        assert blob_store.uploads == []

    @pytest.mark.asyncio
    async def test_update_area_replaces_image(self, area_service, blob_store, test_user):
        area = await AreaFactory.create_area(area_service, test_user.email, image=raw_image("old"))
        old_image = area.image

        updated = await area_service.update_area(area.id, AreaUpdate(image=raw_image("new"), description="Updated"))

        assert updated.image != old_image
        assert updated.description == "Updated"
        assert blob_store.destroyed == [public_id(old_image)]

    @pytest.mark.asyncio
    async def test_update_area_keeps_unsupplied_fields(self, area_service, test_area):
        updated = await area_service.update_area(test_area.id, AreaUpdate(description="New text"))

        assert updated.area_name == "Downtown"
        assert updated.features == ["Metro", "Schools"]

    @pytest.mark.asyncio
    async def test_rename_to_taken_name(self, area_service, test_user, test_area):
        other = await AreaFactory.create_area(area_service, test_user.email, area_name="Palm")

        with pytest.raises(DuplicateResourceError):
            await area_service.update_area(other.id, AreaUpdate(areaName="Downtown"))

    @pytest.mark.asyncio
    async def test_delete_area_detaches_dependents(
        self, db_session, area_service, property_service, project_service, blob_store,
        test_user, test_developer
    ):
        area = await AreaFactory.create_area(area_service, test_user.email, area_name="Hills", image=raw_image("h"))
        property_obj = await PropertyFactory.create_property(property_service, test_user.email, "Hills", prop_images=[])
        project = await ProjectFactory.create_project(
            project_service, test_user.email, "Hills", test_developer.developer_name
        )

        await area_service.delete_area(area.id)

        assert await AreaRepository(db_session).get_by_id(area.id) is None
        assert str(area.id) not in test_user.area_ids
        assert blob_store.destroyed == [public_id(area.image)]

        kept_property = await property_service.get_property(property_obj.id)
        kept_project = await project_service.get_project(project.id)
        assert kept_property.area_id is None
        assert kept_property.area is None
        assert kept_project.area_id is None
        assert kept_project.developer_id == test_developer.id

    @pytest.mark.asyncio
    async def test_delete_missing_area(self, area_service):
        with pytest.raises(NotFoundError):
            await area_service.delete_area(uuid.uuid4())


class TestDeveloperService:
    """Developer workflows."""

    @pytest.mark.asyncio
    async def test_create_developer_links_creator(self, developer_service, test_user):
        developer = await DeveloperFactory.create_developer(developer_service, test_user.email, developer_name="Nakheel")

        assert test_user.developer_ids == [str(developer.id)]
        assert developer.image is None

    @pytest.mark.asyncio
    async def test_duplicate_developer_name(self, developer_service, test_user, test_developer):
        with pytest.raises(DuplicateResourceError):
            await DeveloperFactory.create_developer(developer_service, test_user.email, developer_name="Emaar")

    @pytest.mark.asyncio
    async def test_update_developer_logo(self, developer_service, blob_store, test_user):
        developer = await DeveloperFactory.create_developer(developer_service, test_user.email, image=raw_image("l1"))
        old_logo = developer.image

        updated = await developer_service.update_developer(developer.id, DeveloperUpdate(image=raw_image("l2")))

        assert updated.image != old_logo
        assert blob_store.destroyed == [public_id(old_logo)]

    @pytest.mark.asyncio
    async def test_delete_developer_detaches_projects(
        self, developer_service, project_service, test_user, test_area
    ):
        developer = await DeveloperFactory.create_developer(developer_service, test_user.email, developer_name="Sobha")
        project = await ProjectFactory.create_project(
            project_service, test_user.email, test_area.area_name, "Sobha"
        )
        assert [p.id for p in await developer_service.get_developer_projects(developer)] == [project.id]

        await developer_service.delete_developer(developer.id)

        kept = await project_service.get_project(project.id)
        assert kept.developer_id is None
        assert kept.area_id == test_area.id
        assert str(developer.id) not in test_user.developer_ids


class TestProjectService:
    """Project workflows."""

    @pytest.mark.asyncio
    async def test_create_project_uploads_every_image_set(
        self, project_service, blob_store, test_user, test_area, test_developer
    ):
        project = await ProjectFactory.create_project(
            project_service, test_user.email, test_area.area_name, test_developer.developer_name,
            in_images=[raw_image("in1"), raw_image("in2")],
            out_images=["https://cdn.example.com/out.png"],
            background_image=raw_image("bg"),
            floor_plans=[
                {"floorType": "1BR", "floorSize": 750, "floorImage": raw_image("fp1"), "numOfrooms": 1},
                {"floorType": "2BR", "floorSize": "1100"},
            ]
        )

        assert len(blob_store.uploads) == 4
        assert all(url.startswith(blob_store.base_url) for url in project.interior_images)
        assert project.exterior_images == ["https://cdn.example.com/out.png"]
        assert project.background_image.startswith(blob_store.base_url)
        assert project.floor_plans[0]["floor_image"].startswith(blob_store.base_url)
        assert project.floor_plans[0]["floor_size"] == "750"
        assert project.floor_plans[1] == {
            "floor_type": "2BR", "floor_size": "1100", "floor_image": None, "num_of_rooms": None
        }
        assert project.amenities == ["Pool", "Gym"]
        assert project.start_price == Decimal("1200000")

        assert test_area.project_ids == [str(project.id)]
        assert test_developer.project_ids == [str(project.id)]
        assert test_user.project_ids == [str(project.id)]

    @pytest.mark.asyncio
    async def test_create_project_missing_developer_uploads_nothing(
        self, db_session, project_service, blob_store, test_user, test_area
    ):
        data = ProjectFactory.create_project_data(
            test_user.email, test_area.area_name, "Unknown Developer", in_images=[raw_image("in")]
        )

        with pytest.raises(RelatedEntityNotFoundError, match="Developer"):
            await project_service.create_project(ProjectCreate(**data))

        assert blob_store.uploads == []
        _, total = await project_service.list_projects()
        assert total == 0

    @pytest.mark.asyncio
    async def test_update_project_moves_between_areas(
        self, area_service, project_service, test_user, test_area, test_developer
    ):
        project = await ProjectFactory.create_project(
            project_service, test_user.email, test_area.area_name, test_developer.developer_name
        )
        new_area = await AreaFactory.create_area(area_service, test_user.email, area_name="Creek Harbour")

        updated = await project_service.update_project(project.id, ProjectUpdate(areaName="Creek Harbour"))

        assert updated.area_id == new_area.id
        assert test_area.project_ids == []
        assert new_area.project_ids == [str(project.id)]
        assert test_developer.project_ids == [str(project.id)]

    @pytest.mark.asyncio
    async def test_update_floor_plans_releases_replaced_images(
        self, project_service, blob_store, test_user, test_area, test_developer
    ):
        project = await ProjectFactory.create_project(
            project_service, test_user.email, test_area.area_name, test_developer.developer_name,
            floor_plans=[{"floorType": "Studio", "floorImage": raw_image("fp-old")}]
        )
        old_plan_image = project.floor_plans[0]["floor_image"]

        updated = await project_service.update_project(project.id, ProjectUpdate(
            floorPlans=[{"floorType": "Studio", "floorImage": raw_image("fp-new")}]
        ))

        assert updated.floor_plans[0]["floor_image"] != old_plan_image
        assert blob_store.destroyed == [public_id(old_plan_image)]

    @pytest.mark.asyncio
    async def test_update_project_unknown_area(self, project_service, test_user, test_area, test_developer):
        project = await ProjectFactory.create_project(
            project_service, test_user.email, test_area.area_name, test_developer.developer_name
        )

        with pytest.raises(RelatedEntityNotFoundError):
            await project_service.update_project(project.id, ProjectUpdate(areaName="Atlantis"))

    @pytest.mark.asyncio
    async def test_delete_project_cleans_up(
        self, db_session, project_service, blob_store, test_user, test_area, test_developer
    ):
        project = await ProjectFactory.create_project(
            project_service, test_user.email, test_area.area_name, test_developer.developer_name,
            in_images=[raw_image("in")], background_image=raw_image("bg")
        )
        owned = project.image_urls

        await project_service.delete_project(project.id)

        assert sorted(blob_store.destroyed) == sorted(public_id(url) for url in owned)
        assert test_area.project_ids == []
        assert test_developer.project_ids == []
        assert test_user.project_ids == []
        with pytest.raises(NotFoundError):
            await project_service.get_project(project.id)


class TestPropertyService:
    """Property workflows."""

    @pytest.mark.asyncio
    async def test_create_and_get_round_trip(self, property_service, blob_store, test_user, test_area):
        data = PropertyFactory.create_property_data(
            test_user.email, test_area.area_name,
            prop_images=[raw_image("p1"), raw_image("p2")],
            background_image=raw_image("bg"),
            barcode=raw_image("qr")
        )
        created = await property_service.create_property(PropertyCreate(**data))

        fetched = await property_service.get_property(created.id)

        assert fetched.title == data["title"]
        assert fetched.property_type == data["propertyType"]
        assert fetched.location == data["location"]
        assert fetched.price == Decimal("1850000")
        assert fetched.num_of_rooms == 2
        assert fetched.num_of_bathrooms == 3
        assert fetched.features == data["features"]
        assert fetched.featured is True
        assert fetched.status == PropertyStatus.ACTIVE
        assert fetched.area.area_name == "Downtown"
        assert fetched.creator.email == test_user.email
        assert len(fetched.gallery_images) == 2
        assert all(url.startswith(blob_store.base_url) for url in fetched.image_urls)
        assert len(blob_store.uploads) == 4

    @pytest.mark.asyncio
    async def test_create_with_missing_area_uploads_nothing(self, property_service, blob_store, test_user):
        data = PropertyFactory.create_property_data(test_user.email, "Nowhere", prop_images=[raw_image("p")])

        with pytest.raises(RelatedEntityNotFoundError) as exc_info:
            await property_service.create_property(PropertyCreate(**data))

        assert exc_info.value.status_code == 400
        assert "Nowhere" in exc_info.value.detail
        assert blob_store.uploads == []

    @pytest.mark.asyncio
    async def test_create_with_missing_user_uploads_nothing(self, property_service, blob_store, test_area):
        data = PropertyFactory.create_property_data("ghost@bayhomes.ae", test_area.area_name)

        with pytest.raises(RelatedEntityNotFoundError, match="User"):
            await property_service.create_property(PropertyCreate(**data))

        assert blob_store.uploads == []

    @pytest.mark.asyncio
    async def test_back_references_list_each_id_once(
        self, property_service, test_user, test_area
    ):
        first = await PropertyFactory.create_property(property_service, test_user.email, test_area.area_name)
        second = await PropertyFactory.create_property(property_service, test_user.email, test_area.area_name)
        await property_service.update_property(first.id, PropertyUpdate(areaName="Downtown", title="Renamed"))

        assert test_user.property_ids == [str(first.id), str(second.id)]
        assert test_area.property_ids == [str(first.id), str(second.id)]

    @pytest.mark.asyncio
    async def test_downtown_scenario(self, db_session, property_service, blob_store, test_user, test_area):
        property_obj = await PropertyFactory.create_property(
            property_service, test_user.email, "Downtown",
            prop_images=[raw_image("g1"), raw_image("g2")], background_image=raw_image("bg")
        )
        area = await AreaRepository(db_session).get_by_name("Downtown")
        assert str(property_obj.id) in area.property_ids
        owned = property_obj.image_urls

        await property_service.delete_property(property_obj.id)

        assert str(property_obj.id) not in area.property_ids
        assert str(property_obj.id) not in test_user.property_ids
        assert sorted(blob_store.destroyed) == sorted(public_id(url) for url in owned)
        assert await PropertyRepository(db_session).get_by_id(property_obj.id) is None

    @pytest.mark.asyncio
    async def test_update_mixed_gallery_scenario(self, property_service, blob_store, test_user, test_area):
        property_obj = await PropertyFactory.create_property(
            property_service, test_user.email, test_area.area_name,
            prop_images=["http://old1", "http://old2"]
        )
        assert blob_store.uploads == []
        new_payload = raw_image("new")

        updated = await property_service.update_property(
            property_obj.id, PropertyUpdate(propImages=["http://old1", new_payload])
        )

        assert blob_store.uploads == [new_payload]
        assert updated.gallery_images[0] == "http://old1"
        assert updated.gallery_images[1].startswith(blob_store.base_url)
        assert len(updated.gallery_images) == 2
        assert blob_store.destroyed == ["old2"]

    @pytest.mark.asyncio
    async def test_update_without_images_touches_no_blobs(self, property_service, blob_store, test_user, test_area):
        property_obj = await PropertyFactory.create_property(property_service, test_user.email, test_area.area_name)
        blob_store.reset()

        updated = await property_service.update_property(property_obj.id, PropertyUpdate(price=2000000, featured=False))

        assert updated.price == Decimal("2000000")
        assert updated.featured is False
        assert blob_store.call_count == 0

    @pytest.mark.asyncio
    async def test_status_only_update_twice(self, property_service, blob_store, test_user, test_area):
        property_obj = await PropertyFactory.create_property(property_service, test_user.email, test_area.area_name)
        gallery = list(property_obj.gallery_images)
        blob_store.reset()

        await property_service.update_property_status(property_obj.id, PropertyStatusUpdate(status="archived"))
        updated = await property_service.update_property_status(
            property_obj.id, PropertyStatusUpdate(status="active")
        )

        assert updated.status == PropertyStatus.ACTIVE
        assert updated.gallery_images == gallery
        assert blob_store.call_count == 0

    @pytest.mark.asyncio
    async def test_status_update_missing_property(self, property_service):
        with pytest.raises(NotFoundError):
            await property_service.update_property_status(uuid.uuid4(), PropertyStatusUpdate(status="archived"))

    @pytest.mark.asyncio
    async def test_update_moves_between_areas(self, area_service, property_service, test_user, test_area):
        property_obj = await PropertyFactory.create_property(property_service, test_user.email, test_area.area_name)
        marina = await AreaFactory.create_area(area_service, test_user.email, area_name="Marina")

        updated = await property_service.update_property(property_obj.id, PropertyUpdate(areaName="Marina"))

        assert updated.area_id == marina.id
        assert test_area.property_ids == []
        assert marina.property_ids == [str(property_obj.id)]

    @pytest.mark.asyncio
    async def test_failed_upload_persists_nothing(self, db_session, property_service, blob_store, test_user, test_area):
        blob_store.fail_upload_on = raw_image("broken")
        data = PropertyFactory.create_property_data(
            test_user.email, test_area.area_name, prop_images=[raw_image("ok"), raw_image("broken")]
        )

        with pytest.raises(BlobStoreError):
            await property_service.create_property(PropertyCreate(**data))

        assert blob_store.destroyed == ["bay-homes/blob1"]
        await db_session.refresh(test_user)
        await db_session.refresh(test_area)
        assert test_user.property_ids == []
        assert test_area.property_ids == []
        _, total = await property_service.list_properties()
        assert total == 0

    @pytest.mark.asyncio
    async def test_failed_write_releases_uploaded_blobs(
        self, db_session, property_service, blob_store, test_user, test_area, monkeypatch
    ):
        async def failing_add(obj):
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(property_service.property_repo, "add", failing_add)
        data = PropertyFactory.create_property_data(
            test_user.email, test_area.area_name, prop_images=[raw_image("a")], background_image=raw_image("b")
        )

        with pytest.raises(SQLAlchemyError):
            await property_service.create_property(PropertyCreate(**data))

        assert len(blob_store.uploads) == 2
        assert sorted(blob_store.destroyed) == ["bay-homes/blob1", "bay-homes/blob2"]
        await db_session.refresh(test_user)
        assert test_user.property_ids == []

    @pytest.mark.asyncio
    async def test_release_failure_does_not_fail_delete(
        self, db_session, property_service, blob_store, test_user, test_area
    ):
        property_obj = await PropertyFactory.create_property(property_service, test_user.email, test_area.area_name)
        blob_store.fail_destroy = True

        await property_service.delete_property(property_obj.id)

        assert await PropertyRepository(db_session).get_by_id(property_obj.id) is None

    @pytest.mark.asyncio
    async def test_list_properties_filters(self, property_service, test_user, test_area):
        await PropertyFactory.create_property(property_service, test_user.email, test_area.area_name, title="Sea villa",
                                              property_type="Villa")
        await PropertyFactory.create_property(property_service, test_user.email, test_area.area_name, title="City flat")

        items, total = await property_service.list_properties(title_like="villa", property_type="Villa")

        assert total == 1
        assert items[0].title == "Sea villa"
