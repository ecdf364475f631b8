from __future__ import annotations

import shutil
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from entretelas.domain.errors import PersistenceError
from entretelas.domain.models import (
    Arreglo,
    Articulo,
    Asignacion,
    Cliente,
    Compartimento,
    Invoice,
    Lugar,
    Producto,
    Proveedor,
)

_ASIGNACION_SELECT = """
    SELECT a.id, a.producto_id, a.lugar_id, a.compartimento_id, a.notas,
           l.nombre, c.nombre
    FROM guardado_asignaciones a
    JOIN guardado_lugares l ON l.id = a.lugar_id
    LEFT JOIN guardado_compartimentos c ON c.id = a.compartimento_id
"""

_ARTICULO_SELECT = """
    SELECT a.id, a.producto_id, a.nombre, a.ref, a.descripcion, a.notas,
           a.lugar_id, a.compartimento_id, l.nombre, c.nombre
    FROM guardado_articulos a
    LEFT JOIN guardado_lugares l ON l.id = a.lugar_id
    LEFT JOIN guardado_compartimentos c ON c.id = a.compartimento_id
"""

_INVOICE_COLUMNS = (
    "id, entidad_id, tipo, fecha, fecha_subida, importe, importe_iva_re, "
    "vencimiento, pagada, nombre_archivo"
)

ARREGLO_FIELDS = ("albaran", "fecha", "numero", "cliente", "arreglo", "importe")
PROVEEDOR_FIELDS = ("razon_social", "direccion", "nif")
CLIENTE_FIELDS = ("razon_social", "numero_cliente", "direccion", "nif")

# facturas_pdf has no entidad_tipo column; the invoice tipo says which table entidad_id points at
ENTIDAD_INVOICE_TIPO = {"proveedor": "compra", "cliente": "venta"}
INVOICE_METADATA_FIELDS = ("fecha", "importe", "importe_iva_re", "vencimiento", "pagada")


def _asignacion(r) -> Asignacion:
    return Asignacion(
        id=int(r[0]),
        producto_id=int(r[1]),
        lugar_id=r[2],
        compartimento_id=r[3],
        notas=r[4],
        lugar_nombre=r[5],
        compartimento_nombre=r[6],
    )


def _articulo(r) -> Articulo:
    return Articulo(
        id=int(r[0]),
        producto_id=int(r[1]),
        nombre=str(r[2]),
        ref=r[3],
        descripcion=r[4],
        notas=r[5],
        lugar_id=r[6],
        compartimento_id=r[7],
        lugar_nombre=r[8],
        compartimento_nombre=r[9],
    )


def _compartimento(r) -> Compartimento:
    return Compartimento(id=int(r[0]), lugar_id=int(r[1]), nombre=str(r[2]), descripcion=r[3], orden=int(r[4]))


def _arreglo(r) -> Arreglo:
    return Arreglo(
        id=int(r[0]),
        albaran=str(r[1]),
        fecha=str(r[2]),
        numero=str(r[3]),
        cliente=r[4],
        arreglo=r[5],
        importe=float(r[6]),
    )


def _invoice(r) -> Invoice:
    return Invoice(
        id=int(r[0]),
        entidad_id=int(r[1]),
        tipo=str(r[2]),
        fecha=r[3],
        fecha_subida=r[4],
        importe=r[5],
        importe_iva_re=r[6],
        vencimiento=r[7],
        pagada=int(r[8]),
        nombre_archivo=r[9],
    )


class SqliteRepository:
    def __init__(self, db_path: Path | str):
        self.db_path = str(db_path)

    def _conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    @contextmanager
    def _cursor(self, write: bool = False) -> Iterator[sqlite3.Cursor]:
        conn = self._conn()
        try:
            yield conn.cursor()
            if write:
                conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError(str(exc)) from exc
        finally:
            conn.close()

    def init_db(self) -> None:
        self.run_migrations()

    def run_migrations(self) -> None:
        conn = self._conn()
        backup_path = self._create_pre_migration_backup()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")
            cur.execute("CREATE TABLE IF NOT EXISTS schema_migrations (version INTEGER PRIMARY KEY, applied_at TEXT NOT NULL)")
            cur.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations")
            current_version = int(cur.fetchone()[0])

            migrations = [
                (1, self._migration_v1_guardado),
                (2, self._migration_v2_arreglos),
                (3, self._migration_v3_facturas),
                (4, self._migration_v4_entidades),
            ]

            for version, migration in migrations:
                if version <= current_version:
                    continue
                migration(cur)
                cur.execute(
                    "INSERT INTO schema_migrations (version, applied_at) VALUES (?, datetime('now'))",
                    (version,),
                )
            conn.commit()
        except Exception as exc:
            conn.rollback()
            self._restore_pre_migration_backup(backup_path)
            raise RuntimeError(
                "Database migration failed. Original database restored from automatic backup."
            ) from exc
        finally:
            conn.close()

    def schema_version(self) -> int:
        with self._cursor() as cur:
            cur.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations")
            return int(cur.fetchone()[0])

    def _create_pre_migration_backup(self) -> Path | None:
        db_file = Path(self.db_path)
        if not db_file.exists() or db_file.stat().st_size == 0:
            return None
        backup_file = db_file.with_name(f"{db_file.stem}.pre_migration_{datetime.now().strftime('%Y%m%d%H%M%S')}.bak")
        shutil.copy2(db_file, backup_file)
        return backup_file

    def _restore_pre_migration_backup(self, backup_path: Path | None) -> None:
        if backup_path is None or not backup_path.exists():
            return
        shutil.copy2(backup_path, self.db_path)

    def _migration_v1_guardado(self, cur: sqlite3.Cursor) -> None:
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS guardado_lugares (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                nombre TEXT NOT NULL CHECK(length(trim(nombre)) > 0),
                descripcion TEXT,
                fecha_creacion TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS guardado_compartimentos (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                lugar_id INTEGER NOT NULL,
                nombre TEXT NOT NULL CHECK(length(trim(nombre)) > 0),
                descripcion TEXT,
                orden INTEGER NOT NULL DEFAULT 0,
                FOREIGN KEY(lugar_id) REFERENCES guardado_lugares(id) ON DELETE CASCADE
            )
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS guardado_productos (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                nombre TEXT NOT NULL CHECK(length(trim(nombre)) > 0),
                ref TEXT,
                descripcion TEXT,
                fecha_creacion TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS guardado_asignaciones (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                producto_id INTEGER NOT NULL,
                lugar_id INTEGER NOT NULL,
                compartimento_id INTEGER,
                notas TEXT,
                fecha_creacion TEXT NOT NULL DEFAULT (datetime('now')),
                FOREIGN KEY(producto_id) REFERENCES guardado_productos(id) ON DELETE CASCADE,
                FOREIGN KEY(lugar_id) REFERENCES guardado_lugares(id) ON DELETE CASCADE,
                FOREIGN KEY(compartimento_id) REFERENCES guardado_compartimentos(id) ON DELETE SET NULL
            )
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS guardado_articulos (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                producto_id INTEGER NOT NULL,
                nombre TEXT NOT NULL CHECK(length(trim(nombre)) > 0),
                ref TEXT,
                descripcion TEXT,
                notas TEXT,
                lugar_id INTEGER,
                compartimento_id INTEGER,
                FOREIGN KEY(producto_id) REFERENCES guardado_productos(id) ON DELETE CASCADE,
                FOREIGN KEY(lugar_id) REFERENCES guardado_lugares(id) ON DELETE SET NULL,
                FOREIGN KEY(compartimento_id) REFERENCES guardado_compartimentos(id) ON DELETE SET NULL
            )
            """
        )
        cur.execute("CREATE INDEX IF NOT EXISTS idx_guardado_comp_lugar ON guardado_compartimentos(lugar_id)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_guardado_asig_producto ON guardado_asignaciones(producto_id)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_guardado_art_producto ON guardado_articulos(producto_id)")

    def _migration_v2_arreglos(self, cur: sqlite3.Cursor) -> None:
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS arreglos (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                albaran TEXT NOT NULL CHECK(albaran IN ('Entretelas', 'Isa', 'Loli')),
                fecha TEXT NOT NULL,
                numero TEXT NOT NULL CHECK(length(trim(numero)) > 0),
                cliente TEXT,
                arreglo TEXT,
                importe REAL NOT NULL CHECK(importe >= 0),
                fecha_creacion TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
                fecha_mod TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
            )
            """
        )
        cur.execute(
            """
            CREATE TRIGGER IF NOT EXISTS arreglos_fecha_mod
            AFTER UPDATE ON arreglos
            FOR EACH ROW
            BEGIN
                UPDATE arreglos SET fecha_mod = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')
                WHERE id = OLD.id;
            END
            """
        )
        cur.execute("CREATE INDEX IF NOT EXISTS idx_arreglos_fecha ON arreglos(fecha)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_arreglos_albaran ON arreglos(albaran)")

    def _migration_v3_facturas(self, cur: sqlite3.Cursor) -> None:
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS facturas_pdf (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                entidad_id INTEGER NOT NULL,
                tipo TEXT NOT NULL CHECK(tipo IN ('compra', 'venta', 'arreglos', 'contabilidad')),
                fecha TEXT,
                fecha_subida TEXT NOT NULL DEFAULT (datetime('now')),
                importe REAL,
                importe_iva_re REAL,
                vencimiento TEXT,
                pagada INTEGER NOT NULL DEFAULT 0 CHECK(pagada IN (0, 1)),
                nombre_archivo TEXT
            )
            """
        )
        cur.execute("CREATE INDEX IF NOT EXISTS idx_facturas_entidad ON facturas_pdf(entidad_id, tipo)")

    def _migration_v4_entidades(self, cur: sqlite3.Cursor) -> None:
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS proveedores (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                razon_social TEXT NOT NULL CHECK(length(trim(razon_social)) > 0),
                direccion TEXT,
                nif TEXT,
                fecha_creacion TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS clientes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                razon_social TEXT NOT NULL CHECK(length(trim(razon_social)) > 0),
                numero_cliente TEXT NOT NULL CHECK(length(trim(numero_cliente)) > 0),
                direccion TEXT,
                nif TEXT,
                fecha_creacion TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """
        )

    def integrity_check(self) -> str:
        with self._cursor() as cur:
            cur.execute("PRAGMA integrity_check")
            return str(cur.fetchone()[0])

    # ---------- Lugares ----------
    def _compartimentos(self, cur: sqlite3.Cursor, lugar_id: int | None = None) -> list[Compartimento]:
        sql = "SELECT id, lugar_id, nombre, descripcion, orden FROM guardado_compartimentos"
        params: tuple = ()
        if lugar_id is not None:
            sql += " WHERE lugar_id = ?"
            params = (int(lugar_id),)
        cur.execute(sql + " ORDER BY lugar_id, orden ASC, nombre COLLATE NOCASE ASC", params)
        return [_compartimento(r) for r in cur.fetchall()]

    def list_lugares(self) -> list[Lugar]:
        with self._cursor() as cur:
            cur.execute("SELECT id, nombre, descripcion FROM guardado_lugares ORDER BY nombre COLLATE NOCASE ASC")
            rows = cur.fetchall()
            by_lugar: dict[int, list[Compartimento]] = {}
            for c in self._compartimentos(cur):
                by_lugar.setdefault(c.lugar_id, []).append(c)
        return [
            Lugar(id=int(r[0]), nombre=str(r[1]), descripcion=r[2], compartimentos=tuple(by_lugar.get(int(r[0]), ())))
            for r in rows
        ]

    def get_lugar(self, lugar_id: int) -> Optional[Lugar]:
        with self._cursor() as cur:
            cur.execute("SELECT id, nombre, descripcion FROM guardado_lugares WHERE id = ?", (int(lugar_id),))
            r = cur.fetchone()
            if not r:
                return None
            compartimentos = tuple(self._compartimentos(cur, int(lugar_id)))
        return Lugar(id=int(r[0]), nombre=str(r[1]), descripcion=r[2], compartimentos=compartimentos)

    def create_lugar(self, nombre: str, descripcion: Optional[str]) -> int:
        with self._cursor(write=True) as cur:
            cur.execute("INSERT INTO guardado_lugares (nombre, descripcion) VALUES (?, ?)", (nombre, descripcion))
            return int(cur.lastrowid)

    def update_lugar(self, lugar_id: int, nombre: str, descripcion: Optional[str]) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute(
                "UPDATE guardado_lugares SET nombre = ?, descripcion = ? WHERE id = ?",
                (nombre, descripcion, int(lugar_id)),
            )
            return cur.rowcount > 0

    def delete_lugar(self, lugar_id: int) -> bool:
        # compartimentos and asignaciones cascade; articulos fall back to NULL
        with self._cursor(write=True) as cur:
            cur.execute("DELETE FROM guardado_lugares WHERE id = ?", (int(lugar_id),))
            return cur.rowcount > 0

    # ---------- Compartimentos ----------
    def get_compartimento(self, compartimento_id: int) -> Optional[Compartimento]:
        with self._cursor() as cur:
            cur.execute(
                "SELECT id, lugar_id, nombre, descripcion, orden FROM guardado_compartimentos WHERE id = ?",
                (int(compartimento_id),),
            )
            r = cur.fetchone()
        return _compartimento(r) if r else None

    def compartimento_belongs_to(self, compartimento_id: int, lugar_id: int) -> bool:
        with self._cursor() as cur:
            cur.execute(
                "SELECT 1 FROM guardado_compartimentos WHERE id = ? AND lugar_id = ?",
                (int(compartimento_id), int(lugar_id)),
            )
            return cur.fetchone() is not None

    def create_compartimento(self, lugar_id: int, nombre: str, descripcion: Optional[str]) -> int:
        with self._cursor(write=True) as cur:
            cur.execute(
                "SELECT COALESCE(MAX(orden), -1) FROM guardado_compartimentos WHERE lugar_id = ?",
                (int(lugar_id),),
            )
            orden = int(cur.fetchone()[0]) + 1
            cur.execute(
                "INSERT INTO guardado_compartimentos (lugar_id, nombre, descripcion, orden) VALUES (?, ?, ?, ?)",
                (int(lugar_id), nombre, descripcion, orden),
            )
            return int(cur.lastrowid)

    def update_compartimento(self, compartimento_id: int, nombre: str, descripcion: Optional[str]) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute(
                "UPDATE guardado_compartimentos SET nombre = ?, descripcion = ? WHERE id = ?",
                (nombre, descripcion, int(compartimento_id)),
            )
            return cur.rowcount > 0

    def delete_compartimento(self, compartimento_id: int) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute("DELETE FROM guardado_compartimentos WHERE id = ?", (int(compartimento_id),))
            return cur.rowcount > 0

    # ---------- Productos ----------
    def _producto(self, cur: sqlite3.Cursor, r) -> Producto:
        producto_id = int(r[0])
        cur.execute(_ASIGNACION_SELECT + " WHERE a.producto_id = ? ORDER BY a.fecha_creacion ASC, a.id ASC", (producto_id,))
        asignaciones = tuple(_asignacion(a) for a in cur.fetchall())
        cur.execute(_ARTICULO_SELECT + " WHERE a.producto_id = ? ORDER BY a.nombre COLLATE NOCASE ASC", (producto_id,))
        articulos = tuple(_articulo(a) for a in cur.fetchall())
        return Producto(
            id=producto_id,
            nombre=str(r[1]),
            ref=r[2],
            descripcion=r[3],
            asignaciones=asignaciones,
            articulos=articulos,
        )

    def list_productos(self) -> list[Producto]:
        with self._cursor() as cur:
            cur.execute("SELECT id, nombre, ref, descripcion FROM guardado_productos ORDER BY nombre COLLATE NOCASE ASC")
            rows = cur.fetchall()
            return [self._producto(cur, r) for r in rows]

    def get_producto(self, producto_id: int) -> Optional[Producto]:
        with self._cursor() as cur:
            cur.execute("SELECT id, nombre, ref, descripcion FROM guardado_productos WHERE id = ?", (int(producto_id),))
            r = cur.fetchone()
            return self._producto(cur, r) if r else None

    def create_producto(self, nombre: str, ref: Optional[str], descripcion: Optional[str]) -> int:
        with self._cursor(write=True) as cur:
            cur.execute(
                "INSERT INTO guardado_productos (nombre, ref, descripcion) VALUES (?, ?, ?)",
                (nombre, ref, descripcion),
            )
            return int(cur.lastrowid)

    def update_producto(self, producto_id: int, nombre: str, ref: Optional[str], descripcion: Optional[str]) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute(
                "UPDATE guardado_productos SET nombre = ?, ref = ?, descripcion = ? WHERE id = ?",
                (nombre, ref, descripcion, int(producto_id)),
            )
            return cur.rowcount > 0

    def delete_producto(self, producto_id: int) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute("DELETE FROM guardado_productos WHERE id = ?", (int(producto_id),))
            return cur.rowcount > 0

    # ---------- Asignaciones ----------
    def get_asignacion(self, asignacion_id: int) -> Optional[Asignacion]:
        with self._cursor() as cur:
            cur.execute(_ASIGNACION_SELECT + " WHERE a.id = ?", (int(asignacion_id),))
            r = cur.fetchone()
        return _asignacion(r) if r else None

    def create_asignacion(
        self, producto_id: int, lugar_id: int, compartimento_id: Optional[int], notas: Optional[str]
    ) -> int:
        with self._cursor(write=True) as cur:
            cur.execute(
                """
                INSERT INTO guardado_asignaciones (producto_id, lugar_id, compartimento_id, notas)
                VALUES (?, ?, ?, ?)
                """,
                (int(producto_id), int(lugar_id), compartimento_id, notas),
            )
            return int(cur.lastrowid)

    def update_asignacion(
        self, asignacion_id: int, lugar_id: int, compartimento_id: Optional[int], notas: Optional[str]
    ) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute(
                "UPDATE guardado_asignaciones SET lugar_id = ?, compartimento_id = ?, notas = ? WHERE id = ?",
                (int(lugar_id), compartimento_id, notas, int(asignacion_id)),
            )
            return cur.rowcount > 0

    def delete_asignacion(self, asignacion_id: int) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute("DELETE FROM guardado_asignaciones WHERE id = ?", (int(asignacion_id),))
            return cur.rowcount > 0

    # ---------- Articulos ----------
    def get_articulo(self, articulo_id: int) -> Optional[Articulo]:
        with self._cursor() as cur:
            cur.execute(_ARTICULO_SELECT + " WHERE a.id = ?", (int(articulo_id),))
            r = cur.fetchone()
        return _articulo(r) if r else None

    def create_articulo(
        self,
        producto_id: int,
        nombre: str,
        ref: Optional[str],
        descripcion: Optional[str],
        notas: Optional[str],
        lugar_id: Optional[int],
        compartimento_id: Optional[int],
    ) -> int:
        with self._cursor(write=True) as cur:
            cur.execute(
                """
                INSERT INTO guardado_articulos (producto_id, nombre, ref, descripcion, notas, lugar_id, compartimento_id)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (int(producto_id), nombre, ref, descripcion, notas, lugar_id, compartimento_id),
            )
            return int(cur.lastrowid)

    def update_articulo(
        self,
        articulo_id: int,
        nombre: str,
        ref: Optional[str],
        descripcion: Optional[str],
        notas: Optional[str],
        lugar_id: Optional[int],
        compartimento_id: Optional[int],
    ) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute(
                """
                UPDATE guardado_articulos
                SET nombre = ?, ref = ?, descripcion = ?, notas = ?, lugar_id = ?, compartimento_id = ?
                WHERE id = ?
                """,
                (nombre, ref, descripcion, notas, lugar_id, compartimento_id, int(articulo_id)),
            )
            return cur.rowcount > 0

    def delete_articulo(self, articulo_id: int) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute("DELETE FROM guardado_articulos WHERE id = ?", (int(articulo_id),))
            return cur.rowcount > 0

    # ---------- Arreglos ----------
    def list_arreglos(self, year: int | None = None) -> list[Arreglo]:
        sql = "SELECT id, albaran, fecha, numero, cliente, arreglo, importe FROM arreglos"
        params: tuple = ()
        if year is not None:
            sql += " WHERE fecha LIKE ?"
            params = (f"{int(year):04d}-%",)
        with self._cursor() as cur:
            cur.execute(sql + " ORDER BY fecha DESC, fecha_creacion DESC", params)
            return [_arreglo(r) for r in cur.fetchall()]

    def get_arreglo(self, arreglo_id: int) -> Optional[Arreglo]:
        with self._cursor() as cur:
            cur.execute(
                "SELECT id, albaran, fecha, numero, cliente, arreglo, importe FROM arreglos WHERE id = ?",
                (int(arreglo_id),),
            )
            r = cur.fetchone()
        return _arreglo(r) if r else None

    def create_arreglo(
        self,
        albaran: str,
        fecha: str,
        numero: str,
        cliente: Optional[str],
        arreglo: Optional[str],
        importe: float,
    ) -> int:
        with self._cursor(write=True) as cur:
            cur.execute(
                """
                INSERT INTO arreglos (albaran, fecha, numero, cliente, arreglo, importe)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (albaran, fecha, numero, cliente, arreglo, float(importe)),
            )
            return int(cur.lastrowid)

    def update_arreglo(self, arreglo_id: int, changes: dict) -> bool:
        columns = [c for c in ARREGLO_FIELDS if c in changes]
        if not columns:
            return self.get_arreglo(arreglo_id) is not None
        assignments = ", ".join(f"{c} = ?" for c in columns)
        with self._cursor(write=True) as cur:
            cur.execute(
                f"UPDATE arreglos SET {assignments} WHERE id = ?",
                (*[changes[c] for c in columns], int(arreglo_id)),
            )
            return cur.rowcount > 0

    def delete_arreglo(self, arreglo_id: int) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute("DELETE FROM arreglos WHERE id = ?", (int(arreglo_id),))
            return cur.rowcount > 0

    # ---------- Proveedores / Clientes ----------
    def list_proveedores(self) -> list[Proveedor]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT p.id, p.razon_social, p.direccion, p.nif,
                       (SELECT COUNT(*) FROM facturas_pdf f WHERE f.entidad_id = p.id AND f.tipo = 'compra')
                FROM proveedores p
                ORDER BY p.razon_social COLLATE NOCASE ASC
                """
            )
            return [
                Proveedor(id=int(r[0]), razon_social=str(r[1]), direccion=r[2], nif=r[3], facturas_count=int(r[4]))
                for r in cur.fetchall()
            ]

    def get_proveedor(self, proveedor_id: int) -> Optional[Proveedor]:
        return next((p for p in self.list_proveedores() if p.id == int(proveedor_id)), None)

    def create_proveedor(self, razon_social: str, direccion: Optional[str], nif: Optional[str]) -> int:
        with self._cursor(write=True) as cur:
            cur.execute(
                "INSERT INTO proveedores (razon_social, direccion, nif) VALUES (?, ?, ?)",
                (razon_social, direccion, nif),
            )
            return int(cur.lastrowid)

    def update_proveedor(self, proveedor_id: int, changes: dict) -> bool:
        return self._update_columns("proveedores", PROVEEDOR_FIELDS, proveedor_id, changes)

    def list_clientes(self) -> list[Cliente]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT c.id, c.razon_social, c.numero_cliente, c.direccion, c.nif,
                       (SELECT COUNT(*) FROM facturas_pdf f WHERE f.entidad_id = c.id AND f.tipo = 'venta')
                FROM clientes c
                ORDER BY c.razon_social COLLATE NOCASE ASC
                """
            )
            return [
                Cliente(
                    id=int(r[0]),
                    razon_social=str(r[1]),
                    numero_cliente=str(r[2]),
                    direccion=r[3],
                    nif=r[4],
                    facturas_count=int(r[5]),
                )
                for r in cur.fetchall()
            ]

    def get_cliente(self, cliente_id: int) -> Optional[Cliente]:
        return next((c for c in self.list_clientes() if c.id == int(cliente_id)), None)

    def create_cliente(
        self, razon_social: str, numero_cliente: str, direccion: Optional[str], nif: Optional[str]
    ) -> int:
        with self._cursor(write=True) as cur:
            cur.execute(
                "INSERT INTO clientes (razon_social, numero_cliente, direccion, nif) VALUES (?, ?, ?, ?)",
                (razon_social, numero_cliente, direccion, nif),
            )
            return int(cur.lastrowid)

    def update_cliente(self, cliente_id: int, changes: dict) -> bool:
        return self._update_columns("clientes", CLIENTE_FIELDS, cliente_id, changes)

    def entidad_exists(self, kind: str, entidad_id: int) -> bool:
        table = {"proveedor": "proveedores", "cliente": "clientes"}[kind]
        with self._cursor() as cur:
            cur.execute(f"SELECT 1 FROM {table} WHERE id = ?", (int(entidad_id),))
            return cur.fetchone() is not None

    def delete_entidad(self, kind: str, entidad_id: int) -> bool:
        """Delete a proveedor or cliente together with the invoices filed under it."""
        table = {"proveedor": "proveedores", "cliente": "clientes"}[kind]
        with self._cursor(write=True) as cur:
            cur.execute(f"DELETE FROM {table} WHERE id = ?", (int(entidad_id),))
            if cur.rowcount == 0:
                return False
            cur.execute(
                "DELETE FROM facturas_pdf WHERE entidad_id = ? AND tipo = ?",
                (int(entidad_id), ENTIDAD_INVOICE_TIPO[kind]),
            )
            return True

    def _update_columns(self, table: str, allowed: tuple[str, ...], row_id: int, changes: dict) -> bool:
        columns = [c for c in allowed if c in changes]
        if not columns:
            with self._cursor() as cur:
                cur.execute(f"SELECT 1 FROM {table} WHERE id = ?", (int(row_id),))
                return cur.fetchone() is not None
        assignments = ", ".join(f"{c} = ?" for c in columns)
        with self._cursor(write=True) as cur:
            cur.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                (*[changes[c] for c in columns], int(row_id)),
            )
            return cur.rowcount > 0

    # ---------- Facturas ----------
    def list_invoices_for_entidad(self, entidad_id: int, tipo: str) -> list[Invoice]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_INVOICE_COLUMNS} FROM facturas_pdf
                WHERE entidad_id = ? AND tipo = ?
                ORDER BY COALESCE(NULLIF(fecha, ''), fecha_subida) DESC, id DESC
                """,
                (int(entidad_id), tipo),
            )
            return [_invoice(r) for r in cur.fetchall()]

    def list_invoices_for_year(self, tipo: str, year: int) -> list[Invoice]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_INVOICE_COLUMNS} FROM facturas_pdf
                WHERE tipo = ? AND COALESCE(NULLIF(fecha, ''), fecha_subida) LIKE ?
                ORDER BY id ASC
                """,
                (tipo, f"{int(year):04d}%"),
            )
            return [_invoice(r) for r in cur.fetchall()]

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_INVOICE_COLUMNS} FROM facturas_pdf WHERE id = ?", (int(invoice_id),))
            r = cur.fetchone()
        return _invoice(r) if r else None

    def create_invoice(
        self,
        entidad_id: int,
        tipo: str,
        nombre_archivo: str,
        fecha: Optional[str],
        importe: Optional[float],
        importe_iva_re: Optional[float],
        vencimiento: Optional[str],
    ) -> int:
        with self._cursor(write=True) as cur:
            cur.execute(
                """
                INSERT INTO facturas_pdf (entidad_id, tipo, nombre_archivo, fecha, importe, importe_iva_re, vencimiento)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (int(entidad_id), tipo, nombre_archivo, fecha, importe, importe_iva_re, vencimiento),
            )
            return int(cur.lastrowid)

    def update_invoice(self, invoice_id: int, changes: dict) -> bool:
        columns = [c for c in INVOICE_METADATA_FIELDS if c in changes]
        if not columns:
            return self.get_invoice(invoice_id) is not None
        assignments = ", ".join(f"{c} = ?" for c in columns)
        with self._cursor(write=True) as cur:
            cur.execute(
                f"UPDATE facturas_pdf SET {assignments} WHERE id = ?",
                (*[changes[c] for c in columns], int(invoice_id)),
            )
            return cur.rowcount > 0

    def delete_invoice(self, invoice_id: int) -> bool:
        with self._cursor(write=True) as cur:
            cur.execute("DELETE FROM facturas_pdf WHERE id = ?", (int(invoice_id),))
            return cur.rowcount > 0
