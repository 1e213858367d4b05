from sanic import Sanic
from sanic.response import json, text
from staking.client import StakingClient
from staking.exceptions import NoStakeHistory, InvalidKey, InvalidBlockNumber
from staking.logger import get_logger
import os

WEB_SERVER_HOST = os.getenv('STAKING_HOST', '0.0.0.0')
WEB_SERVER_PORT = int(os.getenv('STAKING_PORT', 8080))
NUM_WORKERS = 1

log = get_logger('Webserver')

app = Sanic('staking')

client = StakingClient()


def _block_num(request):
    block_num = request.args.get('block_num')
    if block_num is None:
        return client.environment.get('block_num', 0)

    try:
        return int(block_num)
    except ValueError:
        raise InvalidBlockNumber(block_num=block_num)


def _read(contract, function, request, **kwargs):
    contract = client.get_contract(contract)
    return getattr(contract, function)(block_num=_block_num(request), **kwargs)


@app.exception(InvalidKey, InvalidBlockNumber)
async def bad_request(request, exception):
    return json({'error': str(exception)}, status=400)


@app.route("/", methods=["GET",])
async def teapot(request):
    return text("I\'m a teapot", status=418)


# Returns {'contracts': JSON List of strings}
@app.route('/contracts', methods=['GET'])
async def get_contracts(request):
    return json({'contracts': client.get_contracts()})


@app.route('/unlock_level/<since_tick:int>', methods=['GET'])
async def get_unlock_level(request, since_tick):
    value = _read(client.staking.name, 'get_unlock_level', request, since_tick=since_tick)
    return json({'value': value}, status=200)


@app.route('/balance/<account>', methods=['GET'])
async def get_balance(request, account):
    try:
        value = _read(client.staking.name, 'get_claimable_balance', request, account=account)
    except NoStakeHistory as e:
        return json({'error': str(e)}, status=404)

    return json({'value': value}, status=200)


@app.route('/stakes/<account>', methods=['GET'])
async def get_stakes(request, account):
    try:
        stakes = _read(client.staking.name, 'get_stakes', request, account=account)
    except NoStakeHistory as e:
        return json({'error': str(e)}, status=404)

    return json({'stakes': stakes}, status=200)


@app.route('/token/balance/<account>', methods=['GET'])
async def get_token_balance(request, account):
    value = _read(client.currency.name, 'balance_of', request, account=account)
    return json({'value': value}, status=200)


@app.route('/token/supply', methods=['GET'])
async def get_token_supply(request):
    value = _read(client.currency.name, 'total_supply', request)
    return json({'value': value}, status=200)


# Expects json object such that:
'''
{
    'sender': 'string',
    'contract': 'string',
    'function': 'string',
    'kwargs': {},
    'block_num': int
}
'''
@app.route('/transaction', methods=['POST'])
async def submit_transaction(request):
    payload = request.json

    if not isinstance(payload, dict):
        return json({'error': 'malformed payload'}, status=400)

    sender = payload.get('sender')
    contract = payload.get('contract')
    function = payload.get('function')
    kwargs = payload.get('kwargs') or {}

    if sender is None or contract is None or function is None or not isinstance(kwargs, dict):
        return json({'error': 'malformed payload'}, status=400)

    environment = dict(client.environment)
    if payload.get('block_num') is not None:
        environment.update({'block_num': payload['block_num']})

    output = client.executor.execute(sender=sender,
                                     contract_name=contract,
                                     function_name=function,
                                     kwargs=kwargs,
                                     environment=environment)

    if output['status_code'] == 1:
        return json({'status_code': 1, 'result': str(output['result'])}, status=400)

    return json({'status_code': 0, 'result': output['result']}, status=200)


def start_webserver():
    log.info('Serving staking ledger on {}:{}'.format(WEB_SERVER_HOST, WEB_SERVER_PORT))
    app.run(host=WEB_SERVER_HOST, port=WEB_SERVER_PORT, workers=NUM_WORKERS, debug=False, access_log=False)


if __name__ == '__main__':
    start_webserver()
