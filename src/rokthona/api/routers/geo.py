from fastapi import APIRouter, Depends

from rokthona.api.dependencies import get_geo_service, get_seed_data_dir
from rokthona.api.guards import require_admin
from rokthona.api.schemas import SeedResponse
from rokthona.models.geo import District, Upazila
from rokthona.models.user import Principal
from rokthona.services.geo_service import GeoService

router = APIRouter(tags=["geo"])


@router.get("/api/districts", response_model=list[District])
def list_districts(geo: GeoService = Depends(get_geo_service)):
    return geo.list_districts()


@router.get("/api/upazilas", response_model=list[Upazila])
def list_upazilas(geo: GeoService = Depends(get_geo_service)):
    return geo.list_upazilas()


@router.get("/api/upazilas/{district_id}", response_model=list[Upazila])
def list_district_upazilas(district_id: str, geo: GeoService = Depends(get_geo_service)):
    return geo.list_upazilas(district_id)


@router.post("/admin/seed", response_model=SeedResponse)
def seed_geo_data(
    _: Principal = Depends(require_admin),
    data_dir: str = Depends(get_seed_data_dir),
    geo: GeoService = Depends(get_geo_service),
):
    return geo.seed(data_dir)
