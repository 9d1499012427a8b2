import logging

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ledger_admin.database.models.center import Center
from ledger_admin.database.models.client import Client
from ledger_admin.database.models.service import Service
from ledger_admin.database.models.transaction import Transaction
from ledger_admin.schemas.transaction_schema import BatchTransactionSchema, TransactionSchema
from ledger_admin.utils.auth import (
    ensure_entity_scope,
    guarded,
    require_center_access,
    require_permission,
    require_service_access,
)
from ledger_admin.utils.data_filter import filter_entities
from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.errors import ResourceNotFound, ValidationFailed
from ledger_admin.utils.helpers import dump, get_or_404, get_store, validate_request
from ledger_admin.utils.permissions import Action, Module
from ledger_admin.utils.response import success_response

logger = logging.getLogger(__name__)

transactions_blueprint = Blueprint('transactions', __name__)


def _resolve_names(store, data):
    """
    Point `center`/`service` at stored records and copy their names onto the
    transaction. A reference that is not a known id is tried as a name.

    Names sent by the client are discarded: the denormalized names drive
    scope filtering and must always match the referenced records.
    """
    errors = {}
    for ref_key, name_key, model in (('center', 'center_name', Center), ('service', 'service_name', Service)):
        data.pop(name_key, None)
        ref = data.get(ref_key)
        if not ref:
            continue
        entity = model.find_by_id(store, ref) or model.find_by_name(store, ref)
        if entity is None:
            errors[ref_key] = [ERROR_MESSAGES["validation"]["unknown_reference"].format(kind=ref_key, ref=ref)]
            continue
        data[ref_key] = entity.id
        data[name_key] = entity.name
    if errors:
        raise ValidationFailed(details=errors)
    return data


def _resolve_client(store, data):
    """Runs after scope checks since it may create a client."""
    if 'client' not in data:
        return data
    client_id, client = Client.resolve_reference(store, data['client'])
    data['client'] = client_id
    if client and not data.get('client_name'):
        data['client_name'] = client.display_name
    return data


# ---------------- Reads ----------------

@transactions_blueprint.route('/transaction', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.TRANSACTIONS, Action.VIEW))
def list_transactions(ctx):
    transactions = filter_entities('transactions', Transaction.find_all(get_store()), ctx.principal, ctx.permissions)
    return success_response(dump(TransactionSchema(), transactions), meta={'total': len(transactions)})


@transactions_blueprint.route('/transaction/<string:transaction_id>', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.TRANSACTIONS, Action.VIEW))
def get_transaction(ctx, transaction_id: str):
    transaction = get_or_404(Transaction, transaction_id, "transaction")
    ensure_entity_scope(ctx, 'transactions', transaction)
    return success_response(dump(TransactionSchema(), transaction))


@transactions_blueprint.route('/transactions/last-index', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.TRANSACTIONS, Action.VIEW))
def get_last_index(ctx):
    return success_response({'lastIndex': Transaction.last_index(get_store())})


@transactions_blueprint.route('/transactions/by-center/<string:centerName>', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.TRANSACTIONS, Action.VIEW), require_center_access())
def list_transactions_by_center(ctx, centerName: str):
    found = Transaction.find_by_center_name(get_store(), centerName)
    # service scope still applies inside an accessible center
    transactions = filter_entities('transactions', found, ctx.principal, ctx.permissions)
    return success_response(dump(TransactionSchema(), transactions), meta={'total': len(transactions)})


@transactions_blueprint.route('/transactions/by-service/<string:serviceName>', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.TRANSACTIONS, Action.VIEW), require_service_access())
def list_transactions_by_service(ctx, serviceName: str):
    found = Transaction.find_by_service_name(get_store(), serviceName)
    transactions = filter_entities('transactions', found, ctx.principal, ctx.permissions)
    return success_response(dump(TransactionSchema(), transactions), meta={'total': len(transactions)})


# ---------------- Writes ----------------

@transactions_blueprint.route('/transaction', methods=['POST'])
@jwt_required()
@guarded(require_permission(Module.TRANSACTIONS, Action.CREATE))
def create_transaction(ctx):
    store = get_store()
    data = _resolve_names(store, validate_request(TransactionSchema()))
    ensure_entity_scope(ctx, 'transactions', data)

    data = _resolve_client(store, data)
    if data.get('index') is None:
        data['index'] = Transaction.last_index(store) + 1

    transaction = Transaction.create(store, data)
    logger.info("Transaction %s (#%s) created by %s", transaction.id, transaction.index, ctx.user_id)
    return success_response(dump(TransactionSchema(), transaction), message="Transaction created successfully", status=201)


@transactions_blueprint.route('/transaction/<string:transaction_id>', methods=['PATCH'])
@jwt_required()
@guarded(require_permission(Module.TRANSACTIONS, Action.EDIT))
def update_transaction(ctx, transaction_id: str):
    store = get_store()
    existing = get_or_404(Transaction, transaction_id, "transaction")
    ensure_entity_scope(ctx, 'transactions', existing)

    changes = _resolve_names(store, validate_request(TransactionSchema(), partial=True))
    # the edited transaction must stay within scope too
    ensure_entity_scope(ctx, 'transactions', {**existing.to_dict(), **changes})

    changes = _resolve_client(store, changes)
    updated = Transaction.update(store, existing.id, changes)
    return success_response(dump(TransactionSchema(), updated), message="Transaction updated successfully")


@transactions_blueprint.route('/transaction/<string:transaction_id>', methods=['DELETE'])
@jwt_required()
@guarded(require_permission(Module.TRANSACTIONS, Action.DELETE))
def delete_transaction(ctx, transaction_id: str):
    existing = get_or_404(Transaction, transaction_id, "transaction")
    ensure_entity_scope(ctx, 'transactions', existing)
    if not Transaction.delete(get_store(), existing.id):
        raise ResourceNotFound(ERROR_MESSAGES["not_found"]["transaction"])
    return success_response({'id': existing.id}, message="Transaction deleted successfully")


@transactions_blueprint.route('/transactions/batch', methods=['POST'])
@jwt_required()
@guarded(require_permission(Module.TRANSACTIONS, Action.CREATE))
def create_transactions_batch(ctx):
    """
    Creates every transaction in the batch or none of them: all rows are
    validated and scope-checked before the first write.
    """
    body = request.get_json(silent=True)
    rows = body.get('transactions') if isinstance(body, dict) else None
    if not isinstance(rows, list):
        raise ValidationFailed(ERROR_MESSAGES["validation"]["transactions_list"])

    store = get_store()
    transactions = validate_request(BatchTransactionSchema(many=True), data=rows)
    errors = {}
    for position, transaction in enumerate(transactions):
        try:
            _resolve_names(store, transaction)
        except ValidationFailed as e:
            errors[position] = e.details
    if errors:
        raise ValidationFailed(details=errors)

    for transaction in transactions:
        ensure_entity_scope(ctx, 'transactions', transaction)

    next_index = Transaction.last_index(store) + 1
    for transaction in transactions:
        _resolve_client(store, transaction)
        if transaction.get('index') is None:
            transaction['index'] = next_index
            next_index += 1

    saved = Transaction.bulk_create(store, transactions)
    logger.info("Batch of %d transactions created by %s", len(saved), ctx.user_id)
    return success_response({
        'transactions': dump(TransactionSchema(), saved),
        'insertedCount': len(saved),
    }, message="Transactions created successfully", status=201)
