"""
HTML 渲染器

将 Paper 渲染为完整、自包含的打印用 HTML 文档，供无头浏览器导出 PDF
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..models import Paper, QuestionType, format_number
from .assets import resolve


# 默认打印模板，样式全部内联，不引用外部字体或样式表
DEFAULT_HTML_TEMPLATE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width,initial-scale=1" />
  <title>{{ paper.exam_title or "Exam" }}</title>
  {%- if base_href %}
  <base href="{{ base_href }}/">
  {%- endif %}
  <style>
    html, body { margin: 0; padding: 0; font-size: 13px; line-height: 1.5; }
    body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Arial, sans-serif; color: #333; background-color: #fff; }
    .container { max-width: 800px; margin: 0 auto; padding: 15mm 12mm; }
    .brand-heading { text-align: center; font-size: 28px; margin: 0 0 10mm; color: #0b8a3e; font-weight: 700; font-family: Georgia, "Times New Roman", serif; letter-spacing: 0.5px; }
    .watermark { position: fixed; top: 50%; left: 50%; transform: translate(-50%, -50%) rotate(-30deg); color: rgba(0,0,0,0.03); font-size: 80px; font-weight: 800; white-space: nowrap; z-index: 1; pointer-events: none; }
    h1 { text-align: center; font-size: 20px; margin: 0 0 5mm; font-weight: 600; }
    .subject { text-align: center; margin: 0 0 3mm; font-weight: 500; color: #555; }
    .paper-meta { text-align: center; margin: 0 0 8mm; font-style: italic; color: #555; }
    ol.instructions { font-size: 12px; margin: 0 0 10mm 20px; padding: 0; color: #555; }
    ol.instructions li { margin: 3px 0; }
    h2 { font-size: 15px; margin: 15px 0 10px; font-weight: 600; border-bottom: 1px solid #eee; padding-bottom: 5px; }
    .question { border-bottom: 1px solid #f2f2f2; padding: 0 0 12px; margin: 18px 0; page-break-inside: avoid; }
    .q-text { margin-bottom: 8px; white-space: pre-wrap; font-weight: 500; }
    .meta { font-size: 12px; white-space: pre-wrap; margin: 10px 0; background-color: #f9f9f9; padding: 8px; border-radius: 4px; }
    .meta strong { color: #555; }
    .options { list-style: none; margin-left: 20px; font-size: 12px; padding-left: 15px; }
    .options li { margin: 6px 0; }
    .opt-label { font-weight: 600; margin-right: 4px; }
    .answer-box { font-size: 12px; margin: 10px 0; }
    .diagram { display: block; max-width: 100%; height: auto; margin: 10px auto; border: 1px solid #eee; padding: 4px; border-radius: 4px; }
  </style>
</head>
<body>
  {%- if brand %}
  <div class="watermark">{{ brand | upper }}</div>
  {%- endif %}
  <div class="container">
    {%- if brand %}
    <div class="brand-heading">{{ brand }}</div>
    {%- endif %}
    {%- if paper.exam_title %}
    <h1>{{ paper.exam_title }}</h1>
    {%- endif %}
    {%- if paper.subject %}
    <div class="subject">Subject: {{ paper.subject }}</div>
    {%- endif %}
    {%- if meta_line %}
    <div class="paper-meta">{{ meta_line }}</div>
    {%- endif %}
    {%- if paper.general_instructions %}
    <ol class="instructions">
      {%- for item in paper.general_instructions %}
      <li>{{ item }}</li>
      {%- endfor %}
    </ol>
    {%- endif %}
    {%- for section in sections %}
    <section>
      <h2><span class="section-title">{{ section.title }}</span>
        {%- if section.instructions %} - {{ section.instructions }}{% endif %}
        {%- if section.marks %} (Marks per Question: {{ section.marks }}){% endif %}</h2>
      {%- for q in section.questions %}
      <div class="question">
        <div class="q-text"><strong class="q-num">{{ q.number }}.</strong> {{ q.text }}</div>
        {%- if q.diagram_src %}
        <img class="diagram" src="{{ q.diagram_src }}" alt="{{ q.diagram_alt }}" />
        {%- endif %}
        {%- if q.options %}
        <ol class="options">
          {%- for label, text in q.options %}
          <li><span class="opt-label">({{ label }})</span> {{ text }}</li>
          {%- endfor %}
        </ol>
        {%- endif %}
        {%- if q.assertion_reason %}
        <div class="meta"><strong>Assertion:</strong> {{ q.assertion }}<br/><strong>Reason:</strong> {{ q.reason }}</div>
        {%- endif %}
        {%- if q.integer %}
        <div class="answer-box">Answer (integer): ____________</div>
        {%- endif %}
      </div>
      {%- endfor %}
    </section>
    {%- endfor %}
  </div>
</body>
</html>
"""


def _letter(index: int) -> str:
    """选项字母：0 -> a, 1 -> b ..."""
    return chr(ord("a") + index)


class HtmlRenderer:
    """
    HTML 渲染器

    将 Paper 对象渲染为打印用 HTML，所有文本字段自动转义
    """

    def __init__(
        self,
        template_path: str | Path | None = None,
        template_string: str | None = None,
        brand: str | None = None,
    ):
        """
        初始化渲染器

        Args:
            template_path: 自定义模板文件路径
            template_string: 自定义模板字符串
            brand: 页眉品牌名称（同时用作水印），None 表示不显示
        """
        if template_path:
            template_dir = Path(template_path).parent
            self.env = Environment(
                loader=FileSystemLoader(str(template_dir)),
                autoescape=select_autoescape(default=True, default_for_string=True),
            )
            self.template = self.env.get_template(Path(template_path).name)
        else:
            self.env = Environment(autoescape=True)
            self.template = self.env.from_string(template_string or DEFAULT_HTML_TEMPLATE)
        self.brand = brand

    def render(
        self,
        paper: Paper,
        base_href: str | None = None,
        asset_base: str | None = None,
    ) -> str:
        """
        渲染试卷为 HTML 文档

        Args:
            paper: 试卷对象
            base_href: 页面 <base> 地址（通常为请求来源），用于解析其它相对资源
            asset_base: 图片资源基础地址，用于解析 /uploads/... 等根相对路径

        Returns:
            完整的 HTML 文档字符串
        """
        sections_data = []
        for section in paper.sections:
            questions_data = []
            for number, question in enumerate(section.questions, 1):
                is_mcq = question.type is QuestionType.MCQ
                questions_data.append({
                    "number": number,
                    "text": question.text,
                    "diagram_src": resolve(question.diagram_ref, asset_base),
                    "diagram_alt": question.diagram_alt or "Diagram",
                    "options": [(_letter(i), o.text) for i, o in enumerate(question.options)] if is_mcq else [],
                    "assertion_reason": question.type is QuestionType.ASSERTION_REASON,
                    "assertion": question.assertion or "",
                    "reason": question.reason or "",
                    "integer": question.type is QuestionType.INTEGER,
                })
            sections_data.append({
                "title": section.title,
                "instructions": section.instructions,
                "marks": format_number(section.marks_per_question) if section.marks_per_question else "",
                "questions": questions_data,
            })

        meta = []
        if paper.total_marks:
            meta.append(f"Total Marks: {format_number(paper.total_marks)}")
        if paper.duration_mins:
            meta.append(f"Time: {paper.duration_mins} mins")

        return self.template.render(
            paper=paper,
            sections=sections_data,
            meta_line=" | ".join(meta),
            base_href=base_href.rstrip("/") if base_href else None,
            brand=self.brand,
        )


def render_paper_html(
    paper: Paper,
    base_href: str | None = None,
    asset_base: str | None = None,
    brand: str | None = None,
) -> str:
    """使用默认模板渲染试卷"""
    return HtmlRenderer(brand=brand).render(paper, base_href=base_href, asset_base=asset_base)
