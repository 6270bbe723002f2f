from datetime import date

import pytest

from restaurante_crm.services.errors import NotFoundError, SummaryServiceError, ValidationError
from restaurante_crm.services.report_service import (
    CSV_BOM,
    LIQUIDADO,
    SIN_VENTAS,
    YA_LIQUIDADO,
    ReportService,
    is_included,
    settlement_description,
)


def _sell(container, client, product, seller, qty, fecha):
    return container.venta_service.record(client.id, product.id, seller.id, qty, fecha=fecha)


def test_is_included_by_modalidad():
    saturday = date(2024, 1, 6)
    sunday = date(2024, 1, 7)
    assert is_included('diario', sunday)
    assert is_included('semanal', saturday)
    assert not is_included('semanal', sunday)
    assert is_included('quincenal', date(2024, 1, 15))
    assert is_included('quincenal', date(2024, 1, 30))
    assert not is_included('quincenal', date(2024, 1, 16))
    # febrero no tiene día 30
    assert not is_included('quincenal', date(2024, 2, 29))
    # desconocida o ausente se trata como diaria
    assert is_included('mensual', sunday)
    assert is_included(None, sunday)


def test_weekly_client_only_on_saturday(container, restaurant):
    _sell(container, restaurant.semanal, restaurant.jugo, restaurant.seller, 2, '2024-01-06T18:00:00+00:00')

    report = container.report_service.build_report('2024-01-06', restaurant.seller.id)
    assert len(report.ventas) == 1
    assert report.total_ventas == 12000
    assert report.fecha_formateada == '6/1/2024'

    sunday = container.report_service.build_report('2024-01-07', restaurant.seller.id)
    assert sunday.ventas == []
    assert sunday.total_ventas == 0


def test_weekly_sale_on_weekday_is_excluded(container, restaurant):
    _sell(container, restaurant.semanal, restaurant.jugo, restaurant.seller, 1, '2024-01-05T12:00:00+00:00')
    _sell(container, restaurant.diario, restaurant.jugo, restaurant.seller, 1, '2024-01-05T13:00:00+00:00')

    report = container.report_service.build_report('2024-01-05', restaurant.seller.id)
    assert [v.client_id for v in report.ventas] == [restaurant.diario.id]


def test_biweekly_client_on_15_and_30(container, restaurant):
    _sell(container, restaurant.quincenal, restaurant.bandeja, restaurant.seller, 1, '2024-01-15T12:00:00+00:00')
    _sell(container, restaurant.quincenal, restaurant.bandeja, restaurant.seller, 1, '2024-01-16T12:00:00+00:00')
    _sell(container, restaurant.quincenal, restaurant.bandeja, restaurant.seller, 2, '2024-01-30T12:00:00+00:00')

    svc = container.report_service
    assert svc.build_report('2024-01-15', restaurant.seller.id).total_ventas == 28000
    assert svc.build_report('2024-01-16', restaurant.seller.id).total_ventas == 0
    assert svc.build_report('2024-01-30', restaurant.seller.id).total_ventas == 56000


def test_unknown_modalidad_counts_as_daily(container, restaurant):
    container.client_repo.save_all(container.client_repo.get_all() + [
        {'id': 'legacy', 'name': 'Cliente Antiguo', 'phone': '', 'local': '', 'modalidad': 'mensual'},
    ])
    container.venta_repo.save_all([{
        'id': 'v1', 'date': '2024-01-09T10:00:00+00:00', 'clientId': 'legacy',
        'productId': restaurant.jugo.id, 'salespersonId': restaurant.seller.id,
        'quantity': 1, 'totalAmount': 6000,
    }])
    report = container.report_service.build_report('2024-01-09', restaurant.seller.id)
    assert report.total_ventas == 6000


def test_report_only_includes_the_salesperson(container, restaurant):
    _sell(container, restaurant.diario, restaurant.jugo, restaurant.seller, 1, '2024-01-09T10:00:00+00:00')
    _sell(container, restaurant.diario, restaurant.bandeja, restaurant.other, 1, '2024-01-09T11:00:00+00:00')

    report = container.report_service.build_report('2024-01-09', restaurant.other.id)
    assert report.total_ventas == 28000


def test_report_validation(container, restaurant):
    with pytest.raises(NotFoundError):
        container.report_service.build_report('2024-01-09', 'nadie')
    for bad in ('2024-1-9', '09/01/2024', 'hoy', '2024-02-30'):
        with pytest.raises(ValidationError):
            container.report_service.build_report(bad, restaurant.seller.id)


def test_search_filters_rows_not_total(container, restaurant):
    _sell(container, restaurant.diario, restaurant.jugo, restaurant.seller, 1, '2024-01-09T10:00:00+00:00')
    _sell(container, restaurant.diario, restaurant.bandeja, restaurant.seller, 1, '2024-01-09T11:00:00+00:00')

    report = container.report_service.build_report('2024-01-09', restaurant.seller.id, search='BANDEJA')
    assert [v.product_id for v in report.ventas_filtradas] == [restaurant.bandeja.id]
    assert report.total_ventas == 34000

    by_client = container.report_service.build_report('2024-01-09', restaurant.seller.id, search='juan')
    assert len(by_client.ventas_filtradas) == 2

    data = report.to_dict(container.report_service.names())
    assert data['totalIncluidas'] == 2
    assert data['ventas'][0]['productName'] == 'Bandeja Paisa'


def test_settle_is_idempotent(container, restaurant):
    _sell(container, restaurant.semanal, restaurant.jugo, restaurant.seller, 2, '2024-01-06T18:00:00+00:00')
    svc = container.report_service

    first = svc.settle('2024-01-06', restaurant.seller.id)
    assert first.status == LIQUIDADO
    assert first.description == 'Liquidación de Luis Gómez - 6/1/2024'
    assert first.transaction.amount == 12000
    assert first.transaction.type == 'entrada'

    second = svc.settle('2024-01-06', restaurant.seller.id)
    assert second.status == YA_LIQUIDADO
    assert second.transaction is None

    matches = [t for t in container.caja_service.list() if t.description == first.description]
    assert len(matches) == 1
    assert svc.build_report('2024-01-06', restaurant.seller.id).is_settled


def test_settle_without_sales_records_nothing(container, restaurant):
    result = container.report_service.settle('2024-01-07', restaurant.seller.id)
    assert result.status == SIN_VENTAS
    assert container.caja_service.list() == []


def test_settlement_description_format():
    assert settlement_description('Ana', date(2024, 3, 5)) == 'Liquidación de Ana - 5/3/2024'


def test_export_csv(container, restaurant):
    _sell(container, restaurant.diario, restaurant.jugo, restaurant.seller, 2, '2024-01-09T08:05:09+00:00')
    container.client_service.update(restaurant.diario.id, {'name': 'Juan "El Chef" Pérez'})

    report = container.report_service.build_report('2024-01-09', restaurant.seller.id)
    filename, content = container.report_service.export_csv(report)

    assert filename == 'Reporte-Ventas-Luis_Gómez-2024-01-09.csv'
    assert content.startswith(CSV_BOM)
    lines = content[len(CSV_BOM):].split('\n')
    assert lines[0] == 'Hora,Cliente,Producto,Cantidad,Monto Total'
    assert lines[1] == '"08:05:09","Juan ""El Chef"" Pérez","Jugo de Naranja",2,12000'
    assert lines[2] == ''
    assert lines[3] == '"Total Ventas",12000'


def test_export_uses_filtered_rows_and_full_total(container, restaurant):
    _sell(container, restaurant.diario, restaurant.jugo, restaurant.seller, 1, '2024-01-09T10:00:00+00:00')
    _sell(container, restaurant.diario, restaurant.bandeja, restaurant.seller, 1, '2024-01-09T11:00:00+00:00')

    report = container.report_service.build_report('2024-01-09', restaurant.seller.id, search='jugo')
    _, content = container.report_service.export_csv(report)
    rows = content.split('\n')
    assert len([r for r in rows if 'Jugo de Naranja' in r]) == 1
    assert not any('Bandeja Paisa' in r for r in rows)
    assert rows[-1] == '"Total Ventas",34000'


def test_export_empty_report_fails(container, restaurant):
    report = container.report_service.build_report('2024-01-09', restaurant.seller.id)
    with pytest.raises(ValidationError):
        container.report_service.export_csv(report)


def test_generate_summary_uses_unfiltered_sales(container, restaurant, summary_stub):
    _sell(container, restaurant.diario, restaurant.jugo, restaurant.seller, 1, '2024-01-09T10:00:00+00:00')
    _sell(container, restaurant.diario, restaurant.bandeja, restaurant.seller, 1, '2024-01-09T11:00:00+00:00')

    report = container.report_service.build_report('2024-01-09', restaurant.seller.id, search='jugo')
    text = container.report_service.generate_summary(report)

    assert text == summary_stub.text
    assert len(summary_stub.calls[0]['ventas']) == 2
    assert summary_stub.calls[0]['salesperson'].name == 'Luis Gómez'


def test_generate_summary_without_service(container, restaurant):
    svc = ReportService(
        container.venta_repo,
        container.client_repo,
        container.product_repo,
        container.salesperson_repo,
        container.caja_service,
    )
    report = svc.build_report('2024-01-09', restaurant.seller.id)
    with pytest.raises(SummaryServiceError):
        svc.generate_summary(report)
