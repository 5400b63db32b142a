import sys
import json
import logging
import argparse

from core.cache import init_score_cache
from core.config_loader import load_config
from core.exceptions import ServiceException
from core.scorer import ScoringService, get_weight_store, initial_weights
from core.sync_service import VehicleSyncService
from core.wargaming_client import WargamingClient
from database.init_db import init_db
from database.uow import vehicle_uow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _init_runtime(config):
    cache = init_score_cache(
        config.cache.redis_url,
        password=config.cache.password,
        default_ttl_seconds=config.cache.default_ttl_seconds
    )
    weights = initial_weights(config.scoring.default_weights.model_dump(by_alias=True))
    get_weight_store().reset(weights)
    return cache


def run_sync(config, cache) -> int:
    with WargamingClient(
        api_key=config.wargaming.api_key,
        base_url=config.wargaming.base_url,
        request_timeout_seconds=config.wargaming.request_timeout_seconds,
        cache=cache,
        cache_ttl_seconds=config.wargaming.cache_ttl_seconds
    ) as client:
        count = VehicleSyncService(client, cache=cache).sync_all()
    logger.info(f"Sync finished: {count} vehicles")
    return count


def run_recalculation(config, cache, custom_weights=None):
    with vehicle_uow() as repo:
        service = ScoringService(repo, cache=cache, config=config.scoring)
        summary = service.recalculate_all_scores(custom_weights)
    logger.info(f"Recalculation summary: {summary.to_dict()}")
    return summary


def main():
    parser = argparse.ArgumentParser(description="TankScout - WoT Blitz vehicle scoring")
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('serve', help='Run the HTTP API')
    subparsers.add_parser('init-db', help='Create database tables')
    subparsers.add_parser('sync', help='Synchronize vehicles from the Wargaming API')
    recalc = subparsers.add_parser('recalculate', help='Recalculate every vehicle score')
    recalc.add_argument('--weights', type=str, default=None,
                        help='JSON object of weight overrides for this run, e.g. \'{"damage": 0.4}\'')
    args = parser.parse_args()

    if args.command == 'serve':
        from web.backend.app import main as serve
        serve()
        return

    if args.command == 'init-db':
        init_db()
        return

    config = load_config()
    cache = _init_runtime(config)

    try:
        if args.command == 'sync':
            run_sync(config, cache)
        elif args.command == 'recalculate':
            custom_weights = None
            if args.weights:
                try:
                    custom_weights = json.loads(args.weights)
                except json.JSONDecodeError as e:
                    parser.error(f"--weights is not valid JSON: {e}")
            run_recalculation(config, cache, custom_weights)
    except ServiceException as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
