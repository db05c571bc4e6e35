from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ContentKind = Literal["project", "post", "page"]
SchemaType = Literal["WebPage", "Article", "BlogPosting", "CreativeWork"]

SCHEMA_TYPES = ("WebPage", "Article", "BlogPosting", "CreativeWork")
CONTENT_KINDS = ("post", "page", "project")

HERO_FIELDS = ("title", "subtitle", "image", "video", "text_color", "background_color")
LINK_FIELDS = ("url", "image", "video")


class HeroFields(BaseModel):
    title: str = ""
    subtitle: str = ""
    image: str = ""  # /images/* path
    video: str = ""  # /images/* path
    text_color: str = ""
    background_color: str = ""


class ProjectLinks(BaseModel):
    url: str = ""
    image: str = ""
    video: str = ""


class Breadcrumb(BaseModel):
    name: str
    url: str


class SchemaBlock(BaseModel):
    # Front-matter keys are consumed by the site build, so they keep its casing
    model_config = ConfigDict(populate_by_name=True)

    type: Optional[SchemaType] = None
    image: Optional[str] = None
    author: Optional[str] = None
    publish_date: Optional[str] = Field(None, alias="publishDate")
    modified_date: Optional[str] = Field(None, alias="modifiedDate")
    breadcrumbs: Optional[List[Breadcrumb]] = None


class SEOSchema(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    canonical: Optional[str] = None
    schema_: Optional[SchemaBlock] = Field(None, alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class TransformedContent(BaseModel):
    """One WordPress item converted into front-matter plus an MDX body."""

    front_matter: Dict[str, Any]
    content: str
    media_references: List[str] = Field(default_factory=list)
    source_id: Optional[int] = None
