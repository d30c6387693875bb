"""领域层模型与协议。

包含：
- models: Turn / ChatContext / ChatRequest / ChatResult 等统一模型。
- vault: 笔记库（Document Store / Link Resolver / Metadata Reader）等外部协作方协议。
- exceptions: 业务异常类型定义。
"""
