"""Database models and the database-backed package registry."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import DeclarativeBase, relationship, sessionmaker

from .dependents import APP_DIRS
from .graph import DependentsGraph
from .models import Dependency, Package, version_sort_key
from .registry import PackageRegistry

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(APP_DIRS.user_data_dir) / "packages.sqlite"


class Base(DeclarativeBase):
    """Base class for all database models."""


class DBDependency(Base):
    """Database model for declared dependency edges."""

    __tablename__ = "dependencies"

    id = Column(Integer, primary_key=True)
    from_package_id = Column(Integer, ForeignKey("packages.id"), nullable=False)
    from_package = relationship("DBPackage", back_populates="raw_dependencies")
    position = Column(Integer, nullable=False)
    reference = Column(String, nullable=False)
    kind = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("from_package_id", "reference", "kind", name="dependency_unique_constraint"),)

    def to_dependency(self) -> Dependency:
        """Convert to a Dependency object."""
        return Dependency(self.reference, self.kind)  # type: ignore[arg-type]


class DBInstall(Base):
    """Database model for installed package versions."""

    __tablename__ = "installs"

    id = Column(Integer, primary_key=True)
    package_id = Column(Integer, ForeignKey("packages.id"), nullable=False)
    package = relationship("DBPackage", back_populates="installs")
    version = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("package_id", "version", name="install_unique_constraint"),)


class RuntimeDependent(Base):
    """Database model for the reverse-dependents index of installed packages.

    Rows refer to packages by full name, so they survive the packages being re-added and can go stale.
    """

    __tablename__ = "runtime_dependents"

    id = Column(Integer, primary_key=True)
    package = Column(String, nullable=False)
    dependent = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("package", "dependent", name="runtime_dependent_unique_constraint"),)


class DBPackage(Base):
    """Database model for packages."""

    __tablename__ = "packages"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    namespace = Column(String, nullable=True)
    full_name = Column(String, nullable=False, unique=True)

    raw_dependencies = relationship(
        "DBDependency",
        back_populates="from_package",
        cascade="all, delete, delete-orphan",
        order_by="DBDependency.position",
    )
    installs = relationship(
        "DBInstall",
        back_populates="package",
        cascade="all, delete, delete-orphan",
    )

    @staticmethod
    def from_package(package: Package, session: Any) -> DBPackage:  # noqa: ANN401
        """Create a DBPackage from a Package and add it to the session."""
        db_package = DBPackage(name=package.name, namespace=package.namespace, full_name=package.full_name)
        session.add(db_package)
        session.flush()
        seen: set[Dependency] = set()
        for position, dep in enumerate(package.dependencies):
            if dep in seen:
                continue
            seen.add(dep)
            session.add(
                DBDependency(
                    from_package_id=db_package.id,
                    position=position,
                    reference=dep.reference,
                    kind=dep.kind.value,
                )
            )
        session.add_all([DBInstall(package_id=db_package.id, version=str(v)) for v in set(package.installed_versions)])
        return db_package

    def to_package(self) -> Package:
        """Convert to a Package object."""
        return Package(
            name=self.name,  # type: ignore[arg-type]
            namespace=self.namespace,  # type: ignore[arg-type]
            dependencies=(dep.to_dependency() for dep in self.raw_dependencies),
            installed_versions=sorted((install.version for install in self.installs), key=version_sort_key),
        )


class DBPackageRegistry(PackageRegistry):
    """Database-backed package registry."""

    def __init__(self, db: str | Path = ":memory:") -> None:
        """Initialize database package registry.

        Args:
            db: Path of the SQLite database file, a SQLAlchemy URL, or ":memory:"

        """
        super().__init__()
        if str(db) in (":memory:", "sqlite:///:memory:"):
            db = "sqlite:///:memory:"
        elif isinstance(db, str) and "://" in db and not db.startswith("sqlite:///"):
            pass
        else:
            db = Path(str(db).removeprefix("sqlite:///"))
        if isinstance(db, Path):
            db.parent.mkdir(parents=True, exist_ok=True)
            db = f"sqlite:///{db.absolute()!s}"
        self.db: str = db
        self._session: Any = None
        self._packages: dict[str, Package] | None = None

    def open(self) -> None:
        """Open the database connection."""
        engine = create_engine(self.db)
        self._session = sessionmaker(bind=engine)()
        Base.metadata.create_all(engine)

    def close(self) -> None:
        """Close the database connection."""
        if self._session is not None:
            self._session.close()
        self._session = None
        self._packages = None

    @property
    def session(self) -> Any:  # noqa: ANN401
        """Get the database session."""
        if self._session is None:
            msg = f"{self.__class__.__name__} must be opened before use"
            raise RuntimeError(msg)
        return self._session

    def _loaded(self) -> dict[str, Package]:
        if self._packages is None:
            self._packages = {
                db_package.full_name: db_package.to_package()
                for db_package in self.session.query(DBPackage).order_by(DBPackage.full_name).all()
            }
        return self._packages

    def __len__(self) -> int:
        """Return the number of packages in the registry."""
        return self.session.query(DBPackage).count()  # type: ignore[no-any-return]

    def all_packages(self) -> Iterable[Package]:
        """Return every known package."""
        return list(self._loaded().values())

    def get(self, full_name: str) -> Package | None:
        """Return the package with exactly this full name, or None."""
        return self._loaded().get(full_name)

    def add(self, package: Package) -> None:
        """Add a package to the registry, replacing any package with the same full name."""
        self.extend((package,))

    def extend(self, packages: Iterable[Package]) -> None:
        """Add multiple packages to the registry.

        This does not update the reverse-dependents index; see `reindex`.
        """
        for package in packages:
            existing = self.session.query(DBPackage).filter(DBPackage.full_name == package.full_name).one_or_none()
            if existing is not None:
                logger.debug("Replacing %s in the database", package.full_name)
                self.session.delete(existing)
                self.session.flush()
            DBPackage.from_package(package, self.session)
        self.session.commit()
        self._packages = None

    def reindex(self) -> None:
        """Rebuild the stored reverse-dependents index from the installed packages."""
        graph = DependentsGraph.from_packages(self.installed_packages(), self)
        self.session.query(RuntimeDependent).delete()
        self.session.add_all(
            [
                RuntimeDependent(package=package.full_name, dependent=dependent.full_name)
                for package in graph
                for dependent in graph.dependents_of(package)
            ]
        )
        self.session.commit()
        logger.info("Indexed the installed dependents of %d packages", len(graph))

    def reverse_dependents(self, package: Package) -> frozenset[Package]:
        """Return the installed dependents of ``package`` recorded by the last `reindex`."""
        dependents = set()
        for row in self.session.query(RuntimeDependent).filter(RuntimeDependent.package == package.full_name):
            dependent = self.get(row.dependent)
            if dependent is None:
                logger.debug("reverse index of %s names unknown package %s", package.full_name, row.dependent)
                continue
            dependents.add(dependent)
        return frozenset(dependents)
