from samankhojo.adapters.clock import SystemClock
from samankhojo.adapters.fs.filestore import FileSystemStore
from samankhojo.adapters.sqlite.repos import SQLiteAssetRepo, SQLiteFestivalRepo
from samankhojo.components.assets import AssetService
from samankhojo.components.festivals import FestivalService
from samankhojo.rules.models import Rules


def build_festival_service(db_path: str, assets_dir: str, rules: Rules) -> FestivalService:
    """Festival service wired outside a request, for the expiry job and the CLI."""
    clock = SystemClock()
    festival_repo = SQLiteFestivalRepo(db_path)
    assets = AssetService(
        repo=SQLiteAssetRepo(db_path),
        store=FileSystemStore(base_path=assets_dir),
        clock=clock,
        rules=rules.uploads,
        festivals=festival_repo,
    )
    return FestivalService(
        repo=festival_repo,
        linker=assets,
        clock=clock,
        rules=rules.festivals,
    )
