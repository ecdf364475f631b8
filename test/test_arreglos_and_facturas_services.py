import pytest

from entretelas.domain.errors import NotFoundError, ValidationError


def _arreglo(container, **overrides):
    data = {"albaran": "Isa", "fecha": "2026-03-05", "numero": "12", "cliente": "Ana", "arreglo": "Bajo", "importe": "10,50"}
    data.update(overrides)
    return container.arreglos.create(**data)


def test_create_and_list_arreglos(container):
    created = _arreglo(container)
    _arreglo(container, fecha="2025-12-30", numero="13", importe=5)

    assert created.importe == pytest.approx(10.5)
    assert created.albaran == "Isa"
    assert [a.numero for a in container.arreglos.get_all()] == ["12", "13"]
    assert [a.numero for a in container.arreglos.get_all(2026)] == ["12"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"albaran": "Otro"},
        {"fecha": "2026-02-30"},
        {"fecha": "05/03/2026"},
        {"importe": -1},
        {"importe": "abc"},
        {"numero": "x" * 101},
        {"numero": "  "},
        {"cliente": "x" * 256},
        {"arreglo": "x" * 2001},
    ],
)
def test_create_arreglo_validates_fields(container, overrides):
    with pytest.raises(ValidationError):
        _arreglo(container, **overrides)


def test_create_arreglo_requires_importe(container):
    with pytest.raises(ValidationError):
        container.arreglos.create(albaran="Isa", fecha="2026-03-05", numero="1")


def test_update_and_delete_arreglo(container):
    created = _arreglo(container)

    updated = container.arreglos.update(created.id, importe="20", cliente=None, albaran="Loli")
    assert updated.importe == pytest.approx(20.0)
    assert updated.cliente is None
    assert updated.albaran == "Loli"
    assert updated.numero == "12"

    container.arreglos.delete(created.id)
    with pytest.raises(NotFoundError):
        container.arreglos.delete(created.id)
    with pytest.raises(NotFoundError):
        container.arreglos.update(created.id, importe=1)


def test_albaran_is_matched_case_insensitively_and_stored_canonically(container):
    isa = _arreglo(container, albaran="isa")
    loli = _arreglo(container, albaran="LOLI", numero="13")
    entretelas = _arreglo(container, albaran=" entretelas ", numero="14")

    assert isa.albaran == "Isa"
    assert loli.albaran == "Loli"
    assert entretelas.albaran == "Entretelas"
    assert container.repo.get_arreglo(loli.id).albaran == "Loli"

    moved = container.arreglos.update(isa.id, albaran="eNtReTeLaS")
    assert moved.albaran == "Entretelas"


def test_arreglos_summaries_from_db(container):
    _arreglo(container, albaran="Isa", importe=100)
    _arreglo(container, albaran="Loli", fecha="2026-03-20", importe=100)
    _arreglo(container, albaran="Entretelas", fecha="2026-07-01", importe=50)

    buckets = container.arreglos.monthly_summary(2026)
    assert [b.month_key for b in buckets] == ["2026-07", "2026-03"]
    assert buckets[1].total_importe == pytest.approx(200.0)

    report = container.arreglos.quarter_summary(2026)
    assert report.quarters[0].total.isa == pytest.approx(100.0)
    assert report.quarters[2].total.entretelas == pytest.approx(50.0)
    assert report.annual_total.total == pytest.approx(250.0)

    split = container.arreglos.split(buckets[1].total_importe)
    assert (split.folder_share, split.tienda_share) == (130.0, 70.0)


def test_upload_and_summarise_invoices(container):
    telas = container.entidades.create_proveedor("Telas SL").id
    ana = container.entidades.create_cliente("Ana", "CLI-1").id
    facturas = container.facturas
    facturas.upload_pdf(telas, "compra", "enero.pdf", fecha="2026-01-15", importe="100")
    facturas.upload_pdf(telas, "compra", "mayo.pdf", fecha="2026-05-02", importe=50, importe_iva_re="70,00")
    facturas.upload_pdf(ana, "venta", "venta.pdf", fecha="2026-02-01", importe=100)
    facturas.upload_pdf(telas, "compra", "viejo.pdf", fecha="2025-05-02", importe=1000)

    compras = facturas.quarter_summary("compra", 2026)
    assert compras.quarters[0].total.amount_with_taxes == pytest.approx(126.2)
    assert compras.quarters[1].total.amount_with_taxes == pytest.approx(70.0)
    assert compras.annual_total.importe == pytest.approx(150.0)

    ventas = facturas.quarter_summary("venta", 2026)
    assert ventas.annual_total.amount_with_taxes == pytest.approx(121.0)

    names = [i.nombre_archivo for i in facturas.get_all_for_entidad(telas, "compra")]
    assert names == ["mayo.pdf", "enero.pdf", "viejo.pdf"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tipo": "otro"},
        {"fecha": "15/01/2026"},
        {"importe": "abc"},
        {"nombre_archivo": ""},
        {"entidad_id": 0},
    ],
)
def test_upload_validates_metadata(container, kwargs):
    data = {"entidad_id": 1, "tipo": "compra", "nombre_archivo": "f.pdf"}
    data.update(kwargs)
    with pytest.raises(ValidationError):
        container.facturas.upload_pdf(**data)


def test_update_invoice_metadata(container):
    telas = container.entidades.create_proveedor("Telas SL").id
    invoice = container.facturas.upload_pdf(telas, "compra", "f.pdf", fecha="2026-01-15", importe="100", importe_iva_re=130)

    paid = container.facturas.update_pdf_metadata(invoice.id, pagada=True, importe_iva_re="")
    assert paid.pagada == 1
    assert paid.importe_iva_re is None
    assert paid.importe == pytest.approx(100.0)

    container.facturas.delete_pdf(invoice.id)
    with pytest.raises(NotFoundError):
        container.facturas.update_pdf_metadata(invoice.id, pagada=False)


def test_invoices_need_an_existing_entidad(container):
    container.entidades.create_proveedor("Primero SL")
    telas = container.entidades.create_proveedor("Telas SL")
    ana = container.entidades.create_cliente("Ana", "CLI-1")

    with pytest.raises(NotFoundError):
        container.facturas.upload_pdf(999, "compra", "f.pdf")
    with pytest.raises(NotFoundError):
        container.facturas.upload_pdf(telas.id, "venta", "f.pdf")

    venta = container.facturas.upload_pdf(ana.id, "venta", "v.pdf")
    assert venta.entidad_id == ana.id


def test_contabilidad_documents_have_no_entidad(container):
    doc = container.facturas.upload_pdf(None, "contabilidad", "resumen.xlsx")
    assert doc.entidad_id == 0
    assert [d.id for d in container.facturas.get_all_for_entidad(None, "contabilidad")] == [doc.id]

    with pytest.raises(ValidationError):
        container.facturas.upload_pdf(3, "contabilidad", "resumen.xlsx")


def test_proveedor_crud_and_invoice_count(container):
    entidades = container.entidades
    entidades.create_proveedor("zeta Hilos")
    telas = entidades.create_proveedor("  Alfa Telas ", direccion="Calle Mayor 1", nif="B12345678")
    container.facturas.upload_pdf(telas.id, "compra", "a.pdf")
    container.facturas.upload_pdf(telas.id, "compra", "b.pdf")

    assert telas.razon_social == "Alfa Telas"
    listed = entidades.get_proveedores()
    assert [p.razon_social for p in listed] == ["Alfa Telas", "zeta Hilos"]
    assert listed[0].facturas_count == 2

    updated = entidades.update_proveedor(telas.id, nif=None, direccion="  ")
    assert (updated.nif, updated.direccion, updated.razon_social) == (None, None, "Alfa Telas")

    with pytest.raises(ValidationError):
        entidades.create_proveedor("   ")
    with pytest.raises(ValidationError):
        entidades.create_proveedor("Telas", nif="X" * 21)
    with pytest.raises(NotFoundError):
        entidades.update_proveedor(999, razon_social="Nadie")


def test_cliente_requires_numero_cliente(container):
    with pytest.raises(ValidationError):
        container.entidades.create_cliente("Ana", "")
    with pytest.raises(ValidationError):
        container.entidades.create_cliente("Ana", "N" * 51)

    ana = container.entidades.create_cliente("Ana", " CLI-7 ")
    assert ana.numero_cliente == "CLI-7"
    assert container.entidades.update_cliente(ana.id, numero_cliente="CLI-8").numero_cliente == "CLI-8"


def test_deleting_an_entidad_removes_only_its_invoices(container):
    telas = container.entidades.create_proveedor("Telas SL")
    otro = container.entidades.create_proveedor("Otro SL")
    ana = container.entidades.create_cliente("Ana", "CLI-1")
    container.facturas.upload_pdf(telas.id, "compra", "telas.pdf", fecha="2026-01-10", importe=10)
    container.facturas.upload_pdf(otro.id, "compra", "otro.pdf", fecha="2026-01-10", importe=20)
    venta = container.facturas.upload_pdf(ana.id, "venta", "ana.pdf", fecha="2026-01-10", importe=30)

    container.entidades.delete_proveedor(telas.id)

    assert container.facturas.get_all_for_entidad(telas.id, "compra") == []
    assert [i.nombre_archivo for i in container.facturas.get_all_for_entidad(otro.id, "compra")] == ["otro.pdf"]
    assert container.repo.get_invoice(venta.id) is not None
    with pytest.raises(NotFoundError):
        container.entidades.delete_proveedor(telas.id)

    container.entidades.delete_cliente(ana.id)
    assert container.repo.get_invoice(venta.id) is None
    assert container.entidades.get_clientes() == []
