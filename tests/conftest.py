"""
Shared pytest fixtures for the swagcomment test suite.

Provides a small Gin-style Go project on disk (router, request types and
handler files) that mirrors the layout the generator is pointed at.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pytest

from swagcomment.config import GeneratorConfig
from swagcomment.syntax import GoSource, SyntaxCache


ROUTER_GO = """package web

import "github.com/gin-gonic/gin"

// SetupRoutes configures all routes.
func (r *Router) SetupRoutes() {
	api := r.Engine.Group("/api/v1")
	authorized := api.Group("/")
	authorized.Use(r.authMW.MiddlewareFunc())

	// Public routes
	api.POST("/login", authHandler.Login)
	api.POST("/captcha/:id/reload", authHandler.ReloadCaptcha)

	// Protected routes
	authorized.GET("/users", userHandler.ListUsers)
	authorized.GET("/users/:id", userHandler.GetUser)
	authorized.PUT("/users/:id", userHandler.UpdateUser)
	authorized.GET("/orgs/:org_id/members/:member_id", orgHandler.GetMember)
}
"""

TYPES_GO = """package types

// GetUserReq represents a request to get a specific user.
type GetUserReq struct {
	ID int64 `uri:"id" binding:"required"`
}

// UpdateUserReq represents a user update request.
type UpdateUserReq struct {
	ID      uint   `uri:"id" binding:"required" swaggerignore:"true"`
	Name    string `json:"name" binding:"required,min=1,max=100"`
	Enabled *bool  `json:"enabled"`
}

// GetMemberReq represents a request for one organization member.
type GetMemberReq struct {
	OrgID    string `uri:"org_id" binding:"required"`
	MemberID int    `uri:"member_id"`
}
"""

USER_HANDLER_GO = """// Package handler contains Web API handlers.
package handler

import (
	"net/http"

	"github.com/gin-gonic/gin"
)

// UserHandler defines the user HTTP handlers.
type UserHandler struct {
	logger *zap.Logger
}

// NewUserHandler creates a new instance of UserHandler.
func NewUserHandler() *UserHandler {
	return &UserHandler{}
}

// GetUser returns one user.
func (h *UserHandler) GetUser(c *gin.Context) {
	c.JSON(http.StatusOK, nil)
}

func (h *UserHandler) ListUsers(c *gin.Context) {
	c.JSON(http.StatusOK, nil)
}

// UpdateUser updates a user.
// It keeps the original author's note.
func (h *UserHandler) UpdateUser(c *gin.Context) {
	c.JSON(http.StatusOK, nil)
}

func (h *UserHandler) DeleteUser(c *gin.Context) {
	c.Status(http.StatusNoContent)
}

// toResp is a helper, not a handler.
func (h *UserHandler) toResp(id int) int {
	return id
}
"""

AUTH_HANDLER_GO = """package handler

import "github.com/gin-gonic/gin"

type AuthHandler struct{}

// Login godoc
// @Summary Login
// @Router /login [post]
func (h *AuthHandler) Login(c *gin.Context) {
}

func (h *AuthHandler) ReloadCaptcha(c *gin.Context) {
}
"""

GET_USER_COMMENT = (
    "// GetUser godoc\n"
    "// @Summary Get User\n"
    "// @Description Retrieves a single User\n"
    "// @Tags user\n"
    "// @Accept json\n"
    "// @Produce json\n"
    '// @Param id path integer true "id"\n'
    '// @Param req query types.GetUserReq false "req"\n'
    '// @Success 200 {object} types.Response{data=types.GetUserResp} "Success"\n'
    '// @Failure 400 {object} types.Response "Bad request"\n'
    '// @Failure 401 {object} types.Response "Unauthorized"\n'
    '// @Failure 500 {object} types.Response "Internal server error"\n'
    "// @Security BearerAuth\n"
    "// @Router /users/{id} [get]\n"
)


@dataclass
class GoProject:
    """Paths of a fixture Go project."""

    root: Path
    handler_dir: Path
    router_file: Path
    types_dir: Path

    def config(self, **overrides) -> GeneratorConfig:
        base = GeneratorConfig(
            handler_dir=str(self.handler_dir),
            router_file=str(self.router_file),
            types_paths=(str(self.types_dir / "*.go"),),
            concurrency=2,
            verbose=False,
        )
        return base.with_overrides(**overrides)

    def write_handler(self, name: str, content: str) -> Path:
        path = self.handler_dir / name
        path.write_text(content, encoding="utf-8")
        return path


@pytest.fixture
def go_project(tmp_path: Path) -> GoProject:
    """Create a Go project with a router, request types and two handler files."""
    handler_dir = tmp_path / "internal" / "api" / "handler"
    types_dir = tmp_path / "internal" / "api" / "types"
    handler_dir.mkdir(parents=True)
    types_dir.mkdir(parents=True)

    router_file = tmp_path / "internal" / "api" / "router.go"
    router_file.write_text(ROUTER_GO, encoding="utf-8")
    (types_dir / "user_types.go").write_text(TYPES_GO, encoding="utf-8")
    (handler_dir / "user_handler.go").write_text(USER_HANDLER_GO, encoding="utf-8")
    (handler_dir / "auth_handler.go").write_text(AUTH_HANDLER_GO, encoding="utf-8")

    return GoProject(
        root=tmp_path,
        handler_dir=handler_dir,
        router_file=router_file,
        types_dir=types_dir,
    )


@pytest.fixture
def parse_go_file(tmp_path: Path):
    """Write Go source to a temp file and return its parsed GoSource."""
    cache = SyntaxCache()
    counter = {"n": 0}

    def _parse(source: str) -> GoSource:
        counter["n"] += 1
        path = tmp_path / f"snippet_{counter['n']}.go"
        path.write_text(source, encoding="utf-8")
        return cache.get_tree(str(path))

    return _parse


@pytest.fixture
def restore_root_logger():
    """Put the root and package loggers back the way pytest configured them."""
    root = logging.getLogger()
    package = logging.getLogger("swagcomment")
    handlers, level, package_level = root.handlers[:], root.level, package.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    package.setLevel(package_level)
